"""Upload request signatures."""
from hashlib import md5, sha1
from typing import Union

from .constants import MD5_SALT


def upload_signature(user_id: Union[int, str], user_key: str, file_id: str, target: str) -> str:
    """
    Compute the `sig` field of an upload-init form.
    
    sig = upper(sha1(userkey + hex(sha1(userid + fileid + target + "0")) + "000000"))
    """
    inner = sha1(f"{user_id}{file_id}{target}0".encode('ascii')).hexdigest()
    return sha1(f"{user_key}{inner}000000".encode('ascii')).hexdigest().upper()


def upload_token(
    user_id: Union[int, str],
    file_id: str,
    file_size: Union[int, str],
    timestamp: Union[int, str],
    app_version: str,
    sign_key: str = '',
    sign_val: str = ''
) -> str:
    """
    Compute the per-attempt `token` field of an upload-init form.
    
    The signature challenge pair is part of the digest, so the token
    changes once a challenge has been answered.
    """
    user_id = str(user_id)
    user_id_md5 = md5(user_id.encode('ascii')).hexdigest()
    digest = md5(MD5_SALT)
    digest.update(f"{file_id}{file_size}{sign_key}{sign_val}{user_id}{timestamp}".encode('ascii'))
    digest.update(user_id_md5.encode('ascii'))
    digest.update(str(app_version).encode('ascii'))
    return digest.hexdigest()
