"""Crypto module: provider ciphers and upload signatures."""
from .protocols import ObfuscationCipher, SessionCipher
from .m115 import M115Cipher
from .ecdh import ECDHCipher
from .signing import upload_signature, upload_token
from .xor import gen_key, xor

__all__ = [
    'ObfuscationCipher',
    'SessionCipher',
    'M115Cipher',
    'ECDHCipher',
    'upload_signature',
    'upload_token',
    'gen_key',
    'xor',
]
