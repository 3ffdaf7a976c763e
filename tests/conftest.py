"""Pytest fixtures for pan115 tests."""
import json
from base64 import b64decode, b64encode
from unittest.mock import AsyncMock

import pytest
from Crypto.Cipher import PKCS1_v1_5
from Crypto.PublicKey import RSA
from Crypto.Random import get_random_bytes

from pan115.core.api import AsyncAPIClient, APIConfig, RawResponse
from pan115.core.crypto import M115Cipher, gen_key, xor
from pan115.core.crypto.constants import G_KEY_L


class M115Server:
    """Server side of the M115 exchange, keyed with a test RSA pair."""
    
    def __init__(self, private_key: RSA.RsaKey):
        self.private_key = private_key
        self.block_size = private_key.size_in_bytes()
    
    def open_request(self, capsule: bytes):
        """Return (key, plaintext) of a client capsule."""
        raw = b64decode(capsule)
        pkcs = PKCS1_v1_5.new(self.private_key)
        buf = b''
        for start in range(0, len(raw), self.block_size):
            buf += pkcs.decrypt(raw[start:start + self.block_size], None)
        key = buf[:16]
        tmp = xor(buf[16:], G_KEY_L)[::-1]
        return key, xor(tmp, gen_key(key, 4))
    
    def seal_reply(self, plaintext: bytes, key: bytes) -> str:
        """Build a reply payload the client opens with `key`."""
        rand_key = get_random_bytes(16)
        tmp = xor(plaintext, gen_key(key, 4))[::-1]
        body = rand_key + xor(tmp, gen_key(rand_key, 12))
        
        chunk_size = self.block_size - 11
        out = b''
        for start in range(0, len(body), chunk_size):
            chunk = body[start:start + chunk_size]
            padded = (
                b'\x00\x01'
                + b'\xff' * (self.block_size - 3 - len(chunk))
                + b'\x00'
                + chunk
            )
            m = int.from_bytes(padded, 'big')
            out += pow(m, self.private_key.d, self.private_key.n).to_bytes(self.block_size, 'big')
        return b64encode(out).decode('ascii')


@pytest.fixture(scope='session')
def rsa_key():
    """Generates a 1024-bit RSA pair standing in for the provider key."""
    return RSA.generate(1024)


@pytest.fixture
def m115_server(rsa_key):
    """Server emulation for the download-info exchange."""
    return M115Server(rsa_key)


@pytest.fixture
def m115_cipher(rsa_key):
    """M115 cipher bound to the test RSA key."""
    return M115Cipher(public_key=rsa_key.publickey())


@pytest.fixture
def cookie():
    """Returns a cookie string carrying the required fields."""
    return "UID=1;CID=2;SEID=3"


@pytest.fixture
def api_client():
    """API client whose transport methods are mocked."""
    client = AsyncAPIClient(APIConfig.default())
    client.request = AsyncMock()
    client.send = AsyncMock()
    return client


def json_response(payload, request_headers=None) -> RawResponse:
    """Build a RawResponse carrying a JSON body."""
    return RawResponse(
        status=200,
        body=json.dumps(payload).encode('utf-8'),
        request_headers=request_headers or {},
        url='https://example.invalid/'
    )


@pytest.fixture
def make_response():
    """Factory of JSON RawResponse objects."""
    return json_response


@pytest.fixture
def sample_file_record():
    """Returns a file record of the file-list API."""
    return {
        'fid': '2001',
        'cid': '1000',
        'n': 'movie.mkv',
        's': '1048576',
        'pc': 'abc123',
        'sha': 'DA39A3EE5E6B4B0D3255BFEF95601890AFD80709',
        'te': '1699900000',
    }


@pytest.fixture
def sample_dir_record():
    """Returns a directory record of the file-list API."""
    return {
        'cid': '1000',
        'pid': '0',
        'n': 'Videos',
        'pc': 'fdir01',
        'te': '1699900000',
    }
