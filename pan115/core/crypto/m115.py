"""
M115 obfuscation cipher.

Used by the download-info endpoint. A one-time 16-byte key is mixed into
the payload with an XOR schedule, then the buffer is RSA encrypted with the
provider public key. Replies are "signed" with the provider private key and
opened by raw public-key exponentiation.
"""
from base64 import b64decode, b64encode
from typing import Optional, Union

from Crypto.Cipher import PKCS1_v1_5
from Crypto.PublicKey import RSA
from Crypto.Random import get_random_bytes

from .constants import G_KEY_L, RSA_PUBKEY_PAIR
from .xor import gen_key, xor


class M115Cipher:
    """
    One-time-key obfuscation cipher.
    
    Example:
        >>> cipher = M115Cipher()
        >>> key = cipher.generate_key()
        >>> capsule = cipher.encode(b'{"pickcode":"abc"}', key)
    """
    
    KEY_SIZE = 16
    BLOCK_SIZE = 128
    
    def __init__(self, public_key: Optional[RSA.RsaKey] = None):
        """
        Initialize the cipher.
        
        Args:
            public_key: RSA public key (defaults to the provider key)
        """
        self._public_key = public_key or RSA.construct(RSA_PUBKEY_PAIR)
        self._pkcs = PKCS1_v1_5.new(self._public_key)
        self._block_size = self._public_key.size_in_bytes()
    
    def generate_key(self) -> bytes:
        """Generate a one-time key; never reuse it across requests."""
        return get_random_bytes(self.KEY_SIZE)
    
    def encode(self, data: Union[bytes, str], key: bytes) -> bytes:
        """
        Encrypt data for the server.
        
        Args:
            data: Plaintext
            key: One-time key from generate_key()
            
        Returns:
            Base64 encoded capsule
        """
        if isinstance(data, str):
            data = data.encode('utf-8')
        if len(key) != self.KEY_SIZE:
            raise ValueError(f"Key must be {self.KEY_SIZE} bytes")
        
        tmp = xor(data, gen_key(key, 4))[::-1]
        buf = key + xor(tmp, G_KEY_L)
        
        chunk_size = self._block_size - 11
        encrypted = bytearray()
        for start in range(0, len(buf), chunk_size):
            encrypted += self._pkcs.encrypt(buf[start:start + chunk_size])
        return b64encode(bytes(encrypted))
    
    def decode(self, data: Union[bytes, str], key: bytes) -> bytes:
        """
        Decrypt a server payload.
        
        Args:
            data: Base64 encoded payload
            key: The one-time key the request was encoded with
            
        Returns:
            Plaintext
            
        Raises:
            ValueError: If the payload is malformed
        """
        raw = b64decode(data)
        n, e = self._public_key.n, self._public_key.e
        
        text = bytearray()
        for start in range(0, len(raw), self._block_size):
            block = int.from_bytes(raw[start:start + self._block_size], 'big')
            m = pow(block, e, n)
            b = m.to_bytes((m.bit_length() + 7) >> 3, 'big')
            text += b[b.index(0) + 1:]
        
        if len(text) < self.KEY_SIZE:
            raise ValueError("Payload too short")
        
        rand_key = bytes(text[:self.KEY_SIZE])
        tmp = xor(bytes(text[self.KEY_SIZE:]), gen_key(rand_key, 12))[::-1]
        return xor(tmp, gen_key(key, 4))
