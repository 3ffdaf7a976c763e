"""
Custom exceptions for 115 cloud storage operations.

Every error raised by pan115 derives from Pan115Error so callers can
catch the whole family at once, or a single operation's kind.
"""
from typing import Optional, Any


class Pan115Error(Exception):
    """Base exception for all 115-related errors."""
    
    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Provider errno / status code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class AuthError(Pan115Error):
    """Exception raised for authentication-related errors."""
    pass


class MissingCredentialError(AuthError):
    """Neither a QR token nor a cookie was configured."""
    pass


class CredentialParseError(AuthError):
    """A cookie string could not be turned into a credential."""
    pass


class QRCodeLoginError(AuthError):
    """Exchanging a QR token for a credential failed."""
    pass


class LoginCheckFailed(AuthError):
    """The credential was built but the liveness check rejected it."""
    pass


class SessionExpiredError(AuthError):
    """The provider asked for a fresh login."""
    pass


class Pan115APIError(Pan115Error):
    """
    Application-level error reported inside a response envelope.
    
    Carries the decoded envelope so callers can inspect provider fields.
    """
    
    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        payload: Any = None
    ) -> None:
        self.payload = payload
        super().__init__(message, error_code)


class RemoteFileNotFoundError(Pan115APIError):
    """The requested file or directory does not exist on the provider."""
    pass


class ListError(Pan115Error):
    """Exception raised when listing a directory fails."""
    pass


class DownloadError(Pan115Error):
    """Exception raised when resolving a download descriptor fails."""
    pass


class EmptyDownloadError(DownloadError):
    """The server reports the file as not downloadable (negative size)."""
    pass


class UnexpectedEmptyResponseError(DownloadError):
    """The decoded download envelope contained no entries."""
    pass


class UploadError(Pan115Error):
    """Exception raised for upload negotiation errors."""
    pass


class SignatureChallengeExceededError(UploadError):
    """
    The server kept issuing signature challenges past the retry bound.
    """
    
    def __init__(self, message: str, attempts: int, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            attempts: Number of init requests sent before giving up
            error_code: Last status code returned by the server
        """
        self.attempts = attempts
        super().__init__(message, error_code)
