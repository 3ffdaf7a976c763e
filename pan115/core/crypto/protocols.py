"""
Protocol definitions for the provider ciphers.

The services only depend on these interfaces so any capability-equivalent
primitive can be plugged in.
"""
from typing import Protocol


class ObfuscationCipher(Protocol):
    """One-time-key cipher used by the download-info endpoint."""
    
    def generate_key(self) -> bytes:
        """Return a fresh one-time key."""
        ...
    
    def encode(self, data: bytes, key: bytes) -> bytes:
        """Encrypt `data` under `key`, returning ASCII-safe bytes."""
        ...
    
    def decode(self, data: bytes, key: bytes) -> bytes:
        """Decrypt a server payload produced for `key`."""
        ...


class SessionCipher(Protocol):
    """ECDH-keyed cipher used by the upload-init endpoint."""
    
    def encrypt(self, data: bytes) -> bytes:
        """Encrypt a request body under the session key."""
        ...
    
    def decrypt(self, data: bytes, decompress: bool = False) -> bytes:
        """Decrypt a response body under the session key."""
        ...
    
    def encode_token(self, timestamp: int) -> str:
        """Bind a timestamp and the session public key into a token."""
        ...
