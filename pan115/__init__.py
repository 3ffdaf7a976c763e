"""
pan115 - Async Python client for 115 cloud storage.

Usage:
    >>> from pan115 import Pan115Client, SessionConfig
    >>> 
    >>> async with Pan115Client(SessionConfig(cookie="UID=...;CID=...;SEID=...")) as pan:
    ...     for entry in await pan.list_files("0"):
    ...         print(entry.name)
"""
import logging
from .client import Pan115Client

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    SessionConfig,
    AsyncAPIClient,
    AsyncAuthService
)

# Models
from .core.session import Credential, CredentialStore, QRCodeSession, QRCodeStatus
from .core.files import FileEntry
from .core.download import DownloadDescriptor
from .core.upload import (
    UploadDecision,
    UploadInitResult,
    SignatureChallenge,
    FileContentSource,
    StreamContentSource,
    compute_upload_hashes
)

# Errors
from .core.exceptions import (
    Pan115Error,
    AuthError,
    MissingCredentialError,
    CredentialParseError,
    QRCodeLoginError,
    LoginCheckFailed,
    SessionExpiredError,
    Pan115APIError,
    RemoteFileNotFoundError,
    ListError,
    DownloadError,
    EmptyDownloadError,
    UnexpectedEmptyResponseError,
    UploadError,
    SignatureChallengeExceededError
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for pan115 modules.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'pan115',
        'pan115.client',
        'pan115.api',
        'pan115.auth',
        'pan115.files',
        'pan115.download',
        'pan115.upload',
        'pan115.upload.file',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'Pan115Client',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'SessionConfig',
    'AsyncAPIClient',
    'AsyncAuthService',
    'Credential',
    'CredentialStore',
    'QRCodeSession',
    'QRCodeStatus',
    'FileEntry',
    'DownloadDescriptor',
    'UploadDecision',
    'UploadInitResult',
    'SignatureChallenge',
    'FileContentSource',
    'StreamContentSource',
    'compute_upload_hashes',
    'Pan115Error',
    'AuthError',
    'MissingCredentialError',
    'CredentialParseError',
    'QRCodeLoginError',
    'LoginCheckFailed',
    'SessionExpiredError',
    'Pan115APIError',
    'RemoteFileNotFoundError',
    'ListError',
    'DownloadError',
    'EmptyDownloadError',
    'UnexpectedEmptyResponseError',
    'UploadError',
    'SignatureChallengeExceededError',
    'setup_logging',
]
