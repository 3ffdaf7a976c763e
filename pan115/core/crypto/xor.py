"""XOR key schedule shared by the 115 ciphers."""
from .constants import G_KTS


def gen_key(rand_key: bytes, sk_len: int = 4) -> bytes:
    """
    Derive an XOR key from a random key.
    
    Args:
        rand_key: Random key bytes (at least `sk_len` long)
        sk_len: Length of the derived key
        
    Returns:
        Derived key of `sk_len` bytes (empty when `rand_key` is empty)
    """
    xor_key = bytearray()
    if rand_key and sk_len > 0:
        length = sk_len * (sk_len - 1)
        index = 0
        for i in range(sk_len):
            x = (rand_key[i] + G_KTS[index]) & 0xff
            xor_key.append(G_KTS[length] ^ x)
            length -= sk_len
            index += sk_len
    return bytes(xor_key)


def xor(src: bytes, key: bytes) -> bytes:
    """
    XOR `src` with a repeating `key`.
    
    The first len(src) % 4 bytes are keyed separately, then the key
    restarts from its first byte for the 4-byte aligned remainder.
    """
    secret = bytearray()
    pad = len(src) % 4
    if pad:
        secret.extend(c ^ k for c, k in zip(src[:pad], key[:pad]))
        src = src[pad:]
    key_len = len(key)
    secret.extend(c ^ key[i % key_len] for i, c in enumerate(src))
    return bytes(secret)
