"""
ECDH session cipher for the upload-init endpoint.

A fresh P-224 key pair is agreed with the provider public key; the shared
secret yields an AES-128-CBC key (first 16 bytes) and IV (last 16 bytes).
"""
import random
from base64 import b64decode, b64encode
from binascii import crc32
from typing import Tuple, Union

import lz4.block
from Crypto.Cipher import AES
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .constants import CRC_SALT, ECDH_REMOTE_PUBKEY


class ECDHCipher:
    """
    Per-negotiation session cipher.
    
    Attributes:
        pub_key: Length-prefixed compressed public point (30 bytes)
        aes_key: AES key derived from the shared secret
        aes_iv: AES IV derived from the shared secret
    """
    
    # Upper bound of an lz4-compressed reply
    MAX_DECOMPRESSED_SIZE = 0x2000
    
    def __init__(self, remote_public_key: bytes = ECDH_REMOTE_PUBKEY):
        """
        Generate a key pair and agree on a secret.
        
        Args:
            remote_public_key: Provider public key as raw X || Y
        """
        curve = ec.SECP224R1()
        private_key = ec.generate_private_key(curve)
        peer = ec.EllipticCurvePublicKey.from_encoded_point(
            curve, b'\x04' + remote_public_key
        )
        secret = private_key.exchange(ec.ECDH(), peer)
        compressed = private_key.public_key().public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.CompressedPoint
        )
        self.pub_key: bytes = bytes((len(compressed),)) + compressed
        self.aes_key: bytes = secret[:16]
        self.aes_iv: bytes = secret[-16:]
    
    def encrypt(self, data: Union[bytes, str]) -> bytes:
        """Encrypt with AES-CBC and PKCS#7 padding."""
        if isinstance(data, str):
            data = data.encode('utf-8')
        pad_size = 16 - (len(data) & 15)
        return AES.new(self.aes_key, AES.MODE_CBC, self.aes_iv).encrypt(
            data + bytes((pad_size,)) * pad_size
        )
    
    def decrypt(self, data: bytes, decompress: bool = False) -> bytes:
        """
        Decrypt a reply.
        
        Args:
            data: Cipher text (trailing partial block is ignored)
            decompress: Reply is a 2-byte little-endian length followed by
                an lz4 block
                
        Returns:
            Plaintext
        """
        plain = AES.new(self.aes_key, AES.MODE_CBC, self.aes_iv).decrypt(
            data[:len(data) & -16]
        )
        if decompress:
            size = plain[0] + (plain[1] << 8)
            return lz4.block.decompress(
                plain[2:size + 2],
                uncompressed_size=self.MAX_DECOMPRESSED_SIZE
            )
        if plain:
            padding = plain[-1]
            if 0 < padding <= 16 and all(c == padding for c in plain[-padding:]):
                plain = plain[:-padding]
        return plain
    
    def encode_token(self, timestamp: int) -> str:
        """
        Encode a timestamp and the public key into a `k_ec` token.
        
        Only the low 32 bits of the timestamp are carried.
        """
        r1, r2 = random.randrange(256), random.randrange(256)
        ts = (timestamp & 0xffffffff).to_bytes(4, 'big')
        pub_key = self.pub_key
        
        token = bytearray()
        token.extend(pub_key[i] ^ r1 for i in range(15))
        token.append(r1)
        token.append(0x73 ^ r1)
        token.extend((r1,) * 3)
        token.extend(r1 ^ ts[3 - i] for i in range(4))
        token.extend(pub_key[i] ^ r2 for i in range(15, len(pub_key)))
        token.append(r2)
        token.append(0x01 ^ r2)
        token.extend((r2,) * 3)
        crc = crc32(CRC_SALT + bytes(token)) & 0xffffffff
        token += crc.to_bytes(4, 'little')
        return b64encode(bytes(token)).decode('ascii')
    
    @staticmethod
    def decode_token(token: Union[str, bytes]) -> Tuple[bytes, int]:
        """Recover (pub_key, timestamp) from a token."""
        data = b64decode(token)
        r1 = data[15]
        r2 = data[39]
        return (
            bytes(c ^ r1 for c in data[:15]) + bytes(c ^ r2 for c in data[24:39]),
            int.from_bytes(bytes(c ^ r1 for c in data[20:24]), 'little'),
        )
