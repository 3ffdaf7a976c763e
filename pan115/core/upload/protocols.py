"""
Protocol definitions for the upload module.

Defines the interfaces the negotiator depends on.
"""
from typing import Protocol


class ContentSource(Protocol):
    """Random-access reader over the content being uploaded."""
    
    async def read_range(self, start: int, end: int) -> bytes:
        """
        Read an inclusive byte range.
        
        Args:
            start: First byte offset
            end: Last byte offset (inclusive)
            
        Returns:
            Range data
        """
        ...
