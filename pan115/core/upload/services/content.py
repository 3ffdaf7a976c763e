"""
Content readers used by the rapid upload negotiation.

Single Responsibility: each reader serves inclusive byte ranges from one
kind of source.
"""
import os
from hashlib import sha1
from pathlib import Path
from typing import Any, BinaryIO, Optional, Tuple, Union

import aiofiles

from ...exceptions import UploadError
from ...logging import get_logger

# Size of the prefix hashed into the pre id
PRE_HASH_SIZE = 128 * 1024

_HASH_BLOCK_SIZE = 1024 * 1024


def _check_range(start: int, end: int) -> int:
    if start < 0 or end < start:
        raise UploadError(f"Invalid byte range {start}-{end}")
    return end - start + 1


class FileContentSource:
    """
    Asynchronous file reader.
    
    Uses aiofiles for non-blocking I/O. The handle is opened on first read
    and kept until close().
    """
    
    def __init__(self, file_path: Union[str, Path]):
        """
        Initialize file reader.
        
        Args:
            file_path: Path to the file
        """
        self._path = Path(file_path)
        self._handle = None
        self._logger = get_logger('pan115.upload.file')
    
    @property
    def path(self) -> Path:
        return self._path
    
    def size(self) -> int:
        """Size of the file in bytes."""
        return self._path.stat().st_size
    
    async def read_range(self, start: int, end: int) -> bytes:
        """Read an inclusive byte range."""
        length = _check_range(start, end)
        try:
            if self._handle is None:
                self._handle = await aiofiles.open(self._path, 'rb')
            await self._handle.seek(start)
            data = await self._handle.read(length)
        except OSError as e:
            raise UploadError(f"Cannot read {self._path} at {start}-{end}: {e}") from e
        
        if len(data) != length:
            raise UploadError(
                f"Short read from {self._path}: wanted {length} bytes at {start}, got {len(data)}"
            )
        self._logger.debug(f"Read range {start}-{end} ({length} bytes)")
        return data
    
    async def close(self) -> None:
        """Close the file handle."""
        if self._handle is not None:
            await self._handle.close()
            self._handle = None
    
    async def __aenter__(self) -> 'FileContentSource':
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class StreamContentSource:
    """
    Reader over a seekable binary stream.
    
    Every read seeks explicitly, so the stream position left by earlier
    consumers does not matter.
    """
    
    def __init__(self, stream: BinaryIO):
        """
        Initialize stream reader.
        
        Args:
            stream: Seekable binary stream (file object, BytesIO)
        """
        if not stream.seekable():
            raise UploadError("Content stream must be seekable")
        self._stream = stream
    
    def size(self) -> int:
        """Size of the stream in bytes; the position is restored."""
        position = self._stream.tell()
        try:
            return self._stream.seek(0, os.SEEK_END)
        finally:
            self._stream.seek(position)
    
    async def read_range(self, start: int, end: int) -> bytes:
        """Read an inclusive byte range."""
        length = _check_range(start, end)
        try:
            self._stream.seek(start)
            data = self._stream.read(length)
        except OSError as e:
            raise UploadError(f"Cannot read stream at {start}-{end}: {e}") from e
        if len(data) != length:
            raise UploadError(
                f"Short read from stream: wanted {length} bytes at {start}, got {len(data)}"
            )
        return data


def as_content_source(content: Any):
    """
    Wrap a path or stream into a content source.
    
    Objects already providing read_range() are returned unchanged.
    """
    if hasattr(content, 'read_range'):
        return content
    if isinstance(content, (str, Path)):
        return FileContentSource(content)
    if hasattr(content, 'seek') and hasattr(content, 'read'):
        return StreamContentSource(content)
    raise UploadError(f"Unsupported content type: {type(content).__name__}")


async def compute_upload_hashes(source, size: Optional[int] = None) -> Tuple[str, str]:
    """
    Compute the hashes an upload-init request identifies content by.
    
    Args:
        source: Content source, path or seekable stream
        size: Content size (asked from the source when omitted)
        
    Returns:
        (pre_id, file_id): upper-case SHA-1 of the first 128 KiB and of
        the whole content
    """
    reader = as_content_source(source)
    if size is None:
        size = reader.size()
    
    pre_hash = sha1()
    full_hash = sha1()
    offset = 0
    try:
        while offset < size:
            end = min(offset + _HASH_BLOCK_SIZE, size) - 1
            block = await reader.read_range(offset, end)
            if offset < PRE_HASH_SIZE:
                pre_hash.update(block[:PRE_HASH_SIZE - offset])
            full_hash.update(block)
            offset = end + 1
    finally:
        if reader is not source and isinstance(reader, FileContentSource):
            await reader.close()
    
    return pre_hash.hexdigest().upper(), full_hash.hexdigest().upper()
