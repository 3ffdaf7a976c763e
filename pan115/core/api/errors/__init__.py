"""115 API errors and envelope checking."""
from .api_errors import APIErrorCodes, check_envelope

__all__ = [
    'APIErrorCodes',
    'check_envelope',
]
