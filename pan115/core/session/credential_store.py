"""
In-memory credential storage.

Holds the single credential of a provider session.
"""
from typing import Optional

from .models import Credential


class CredentialStore:
    """
    Replaceable credential cell.
    
    A session holds at most one credential. set() swaps it in a single
    assignment, so readers observe either the old or the new credential.
    Nothing is persisted.
    
    Example:
        >>> store = CredentialStore()
        >>> store.set(Credential.from_cookie("UID=1;CID=2;SEID=3"))
        >>> store.get().cookie
        'UID=1;CID=2;SEID=3'
    """
    
    def __init__(self):
        """Initialize empty storage."""
        self._credential: Optional[Credential] = None
        self._generation = 0
    
    def get(self) -> Optional[Credential]:
        """Return the current credential, if any."""
        return self._credential
    
    def set(self, credential: Credential) -> None:
        """
        Replace the current credential.
        
        Args:
            credential: New credential
        """
        self._credential = credential
        self._generation += 1
    
    def clear(self) -> None:
        """Drop the current credential."""
        self._credential = None
        self._generation += 1
    
    def exists(self) -> bool:
        """Check if a credential is held."""
        return self._credential is not None
    
    @property
    def generation(self) -> int:
        """Counter bumped on every replacement; keys per-credential caches."""
        return self._generation
