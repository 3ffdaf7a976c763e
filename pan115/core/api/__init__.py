"""115 API module: HTTP client, configuration and authentication."""
from .errors import APIErrorCodes, check_envelope
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, SessionConfig
from .async_client import AsyncAPIClient, RawResponse
from .async_auth import AsyncAuthService, AuthResult

__all__ = [
    # Async client
    'AsyncAPIClient',
    'RawResponse',
    'AsyncAuthService',
    'AuthResult',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'SessionConfig',
    
    # Errors
    'APIErrorCodes',
    'check_envelope',
]
