"""115 API error codes and envelope checking."""
from typing import Any, Dict, Type

from ...exceptions import (
    Pan115Error,
    Pan115APIError,
    RemoteFileNotFoundError,
    SessionExpiredError,
    AuthError,
)


class APIErrorCodes:
    """115 API errno values seen in response envelopes."""
    
    ERROR_CODES: Dict[int, str] = {
        99: 'Login required: please log in again',
        911: 'Account verification required',
        20004: 'Directory name already exists',
        20009: 'Parent directory does not exist',
        50003: 'Pick code does not exist',
        70005: 'File does not exist or has been deleted',
        90008: 'File or directory does not exist or has been deleted',
        990001: 'Login expired: please log in again',
    }
    
    ERROR_KINDS: Dict[int, Type[Pan115Error]] = {
        99: SessionExpiredError,
        911: AuthError,
        20009: RemoteFileNotFoundError,
        50003: RemoteFileNotFoundError,
        70005: RemoteFileNotFoundError,
        90008: RemoteFileNotFoundError,
        990001: SessionExpiredError,
    }
    
    @classmethod
    def get_message(cls, code: int) -> str:
        """Gets error message for error code."""
        return cls.ERROR_CODES.get(code, f"Unknown error: {code}")
    
    @classmethod
    def get_kind(cls, code: int, default: Type[Pan115Error]) -> Type[Pan115Error]:
        """Gets the exception class mapped to an errno, or `default`."""
        return cls.ERROR_KINDS.get(code, default)


def _envelope_code(payload: Dict[str, Any]) -> int:
    for key in ('errno', 'errNo', 'code', 'errcode'):
        value = payload.get(key)
        if value not in (None, '', 0, '0'):
            try:
                return int(value)
            except (TypeError, ValueError):
                continue
    return 0


def _envelope_message(payload: Dict[str, Any], code: int) -> str:
    for key in ('error', 'msg', 'message', 'error_msg'):
        value = payload.get(key)
        if value:
            return str(value)
    return APIErrorCodes.get_message(code)


def check_envelope(
    payload: Any,
    default: Type[Pan115Error] = Pan115APIError
) -> Dict[str, Any]:
    """
    Check a decoded 115 response envelope.
    
    A falsy 'state' signals an application-level error; the errno found
    in the envelope selects the raised exception class.
    
    Args:
        payload: Decoded JSON response
        default: Exception class for unmapped errors
        
    Returns:
        The envelope itself when it signals success
        
    Raises:
        Pan115Error: Subclass selected by errno when 'state' is falsy
    """
    if not isinstance(payload, dict):
        raise default(f"Unexpected response: {payload!r}")
    
    if payload.get('state', True):
        return payload
    
    code = _envelope_code(payload)
    message = _envelope_message(payload, code)
    kind = APIErrorCodes.get_kind(code, default)
    
    if issubclass(kind, Pan115APIError):
        raise kind(message, code, payload)
    raise kind(message, code)
