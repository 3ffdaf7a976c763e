"""
Pan115Client - High-level async client for 115 cloud storage.

Example:
    >>> config = SessionConfig(cookie="UID=...;CID=...;SEID=...")
    >>> async with Pan115Client(config) as pan:
    ...     for entry in await pan.list_files("0"):
    ...         print(entry.name)
"""
from typing import Any, Callable, List, Optional

from .core.api import (
    AsyncAPIClient,
    AsyncAuthService,
    AuthResult,
    APIConfig,
    SessionConfig,
)
from .core.api.endpoints import API_APP_VERSION, APP_VERSION_FALLBACK, APP_VERSION_PLATFORM
from .core.crypto import ObfuscationCipher, SessionCipher
from .core.download import DownloadDescriptor, DownloadService
from .core.exceptions import Pan115Error
from .core.files import FileEntry, FileListService
from .core.logging import get_logger
from .core.session import Credential, CredentialStore, QRCodeSession, QRCodeStatus
from .core.upload import RapidUploadNegotiator, UploadInitResult


class Pan115Client:
    """
    Provider session for 115.
    
    Owns one credential and one HTTP session. login() must complete before
    the other operations; those are independent of each other and share
    only the credential and the HTTP session.
    
    With a cookie:
        >>> pan = Pan115Client(SessionConfig(cookie="UID=1;CID=2;SEID=3"))
        >>> await pan.login()
    
    With a scanned QR code:
        >>> pan = Pan115Client()
        >>> qr = await pan.qrcode_token()
        >>> # ... show qr.qrcode, wait for QRCodeStatus.SIGNED_IN ...
        >>> pan.config.qrcode_token = qr.uid
        >>> await pan.login()
    """
    
    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        *,
        api_config: Optional[APIConfig] = None,
        obfuscation_cipher: Optional[ObfuscationCipher] = None,
        session_cipher_factory: Optional[Callable[[], SessionCipher]] = None
    ):
        """
        Initialize 115 client.
        
        Args:
            config: Session configuration (credentials, page size, user agent)
            api_config: HTTP configuration (proxy, SSL, timeouts)
            obfuscation_cipher: Cipher of the download-info exchange
            session_cipher_factory: Builds the cipher of an upload negotiation
        """
        self._config = config or SessionConfig()
        self._logger = get_logger('pan115.client')
        
        api_config = api_config or APIConfig(user_agent=self._config.user_agent)
        
        self._api = AsyncAPIClient(api_config)
        self._store = CredentialStore()
        self._auth = AsyncAuthService(self._api, self._store)
        self._files = FileListService(self._api)
        self._downloads = DownloadService(self._api, obfuscation_cipher)
        self._uploads = RapidUploadNegotiator(
            self._api,
            self._store,
            cipher_factory=session_cipher_factory,
            max_signature_retries=self._config.max_signature_retries
        )
        
        self._auth_result: Optional[AuthResult] = None
        self._app_version: Optional[str] = None
    
    @property
    def config(self) -> SessionConfig:
        """Session configuration."""
        return self._config
    
    @property
    def credential(self) -> Optional[Credential]:
        """Active credential."""
        return self._store.get()
    
    @property
    def user_id(self) -> Optional[int]:
        """User id reported by the last login."""
        return self._auth_result.user_id if self._auth_result else None
    
    @property
    def is_logged_in(self) -> bool:
        """Check if logged in."""
        return self._store.exists()
    
    # =========================================================================
    # Context manager
    # =========================================================================
    
    async def __aenter__(self) -> 'Pan115Client':
        """Enter async context - opens the HTTP session and logs in if configured."""
        await self._api.__aenter__()
        if self._config.qrcode_token or self._config.cookie:
            try:
                await self.login()
            except Exception:
                await self.close()
                raise
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context - cleanup."""
        await self.close()
    
    async def close(self):
        """Close the client and release resources."""
        await self._api.close()
    
    # =========================================================================
    # Authentication
    # =========================================================================
    
    async def login(self) -> AuthResult:
        """
        Establish the session credential.
        
        Uses the configured QR token if any (consumed by this call),
        otherwise the configured cookie, then checks the credential.
        
        Returns:
            AuthResult with the installed credential
        """
        self._auth_result = await self._auth.login(self._config)
        return self._auth_result
    
    async def set_credential(self, credential: Credential) -> AuthResult:
        """
        Check and install an already parsed credential.
        
        A pending QR token in the config is left untouched.
        
        Args:
            credential: Credential to use
        """
        self._auth_result = await self._auth.install(credential)
        self._config.cookie = credential.cookie
        return self._auth_result
    
    async def qrcode_token(self) -> QRCodeSession:
        """Start a QR code login."""
        return await self._auth.qrcode_token()
    
    async def qrcode_status(self, session: QRCodeSession) -> QRCodeStatus:
        """Poll the scan state of a QR code login."""
        return await self._auth.qrcode_status(session)
    
    # =========================================================================
    # Operations
    # =========================================================================
    
    async def list_files(self, directory_id: str = '0', page_size: Optional[int] = None) -> List[FileEntry]:
        """
        List a directory.
        
        Args:
            directory_id: Directory id ('0' is the root)
            page_size: Page size; <= 0 uses the provider limit, None the
                configured one
                
        Returns:
            All entries, in server order
        """
        return await self._files.list_files(
            directory_id,
            self._config.effective_page_size(page_size)
        )
    
    async def resolve_download(self, pick_code: str, user_agent: Optional[str] = None) -> DownloadDescriptor:
        """
        Resolve a signed download URL.
        
        Args:
            pick_code: Pick code of the file
            user_agent: User-Agent the URL is bound to (defaults to the
                configured one); byte fetches must send the same value
        """
        return await self._downloads.resolve(pick_code, user_agent or self._config.user_agent)
    
    async def get_app_version(self) -> str:
        """
        Get the client version reported to the upload endpoint.
        
        Falls back to a known version when the version service is
        unreachable or answers unexpectedly.
        """
        if self._app_version:
            return self._app_version
        
        try:
            response = await self._api.request('GET', API_APP_VERSION, with_cookie=False)
            version = response['data'][APP_VERSION_PLATFORM]['version_code']
        except (Pan115Error, KeyError, TypeError) as e:
            self._logger.warning(f"Cannot get app version, using {APP_VERSION_FALLBACK}: {e}")
            return APP_VERSION_FALLBACK
        
        if not version:
            self._logger.warning(f"Empty app version, using {APP_VERSION_FALLBACK}")
            return APP_VERSION_FALLBACK
        
        self._app_version = str(version)
        return self._app_version
    
    async def rapid_upload(
        self,
        file_size: int,
        file_name: str,
        dir_id: str,
        pre_id: str,
        file_id: str,
        stream: Any
    ) -> UploadInitResult:
        """
        Try an instant upload.
        
        Args:
            file_size: Content size in bytes
            file_name: Name of the new file
            dir_id: Target directory id
            pre_id: Upper-case SHA-1 of the first 128 KiB
            file_id: Upper-case SHA-1 of the content
            stream: Content source, path or seekable stream for signature
                challenges
                
        Returns:
            UploadInitResult; decision MUST_UPLOAD means the bytes still
            have to be transferred
        """
        app_version = await self.get_app_version()
        return await self._uploads.negotiate(
            file_size, file_name, dir_id, pre_id, file_id, stream, app_version
        )
    
    def __repr__(self) -> str:
        return f"<Pan115Client user_id={self.user_id} logged_in={self.is_logged_in}>"
