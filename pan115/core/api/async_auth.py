"""
Async authentication service.

Handles 115 authentication asynchronously: QR token exchange, cookie
import and the liveness check.
"""
from dataclasses import dataclass
from typing import Optional

from .async_client import AsyncAPIClient
from .config import SessionConfig
from .endpoints import (
    API_LOGIN_CHECK,
    API_QRCODE_LOGIN,
    API_QRCODE_STATUS,
    API_QRCODE_TOKEN,
    QRCODE_APPS,
)
from .errors import check_envelope
from ..exceptions import (
    Pan115Error,
    MissingCredentialError,
    QRCodeLoginError,
    LoginCheckFailed,
)
from ..logging import get_logger
from ..session import Credential, CredentialStore, QRCodeSession, QRCodeStatus


@dataclass
class AuthResult:
    """Authentication result."""
    credential: Credential
    user_id: Optional[int]
    user_name: str = ''


class AsyncAuthService:
    """
    Asynchronous authentication service.
    
    The credential is installed into the store only after the liveness
    check succeeded, so a failed login leaves the previous credential in
    place. Callers serialize login() against other operations.
    """
    
    def __init__(self, client: AsyncAPIClient, store: CredentialStore):
        """
        Initialize auth service.
        
        Args:
            client: Async API client
            store: Credential storage of the session
        """
        self._client = client
        self._store = store
        self._logger = get_logger('pan115.auth')
    
    async def login(self, config: SessionConfig) -> AuthResult:
        """
        Establish a credential from the session configuration.
        
        A configured QR token takes precedence over the cookie. The token is
        single-use: it is cleared from the config whatever the outcome, and
        on success the config cookie is replaced with the synthesized one.
        
        Args:
            config: Session configuration (mutated as described)
            
        Returns:
            AuthResult with the installed credential
            
        Raises:
            MissingCredentialError: Neither QR token nor cookie configured
            CredentialParseError: The cookie lacks UID, CID or SEID
            QRCodeLoginError: The QR exchange failed
            LoginCheckFailed: The liveness check rejected the credential
        """
        if config.qrcode_token:
            token, config.qrcode_token = config.qrcode_token, ''
            credential = await self.login_qrcode(token, config.qrcode_source)
            config.cookie = credential.cookie
            self._logger.info("Logged in by QR code")
        elif config.cookie:
            credential = Credential.from_cookie(config.cookie)
        else:
            raise MissingCredentialError("Missing cookie or QR code token")
        
        return await self.install(credential)
    
    async def install(self, credential: Credential) -> AuthResult:
        """
        Check a credential and make it the session credential.
        
        Args:
            credential: Credential to install
            
        Raises:
            LoginCheckFailed: The liveness check rejected the credential
        """
        user_id = await self.check(credential)
        
        self._store.set(credential)
        self._client.cookie = credential.cookie
        self._logger.info(f"Login check passed for user {user_id}")
        
        return AuthResult(credential=credential, user_id=user_id)
    
    async def login_qrcode(self, token: str, app: str) -> Credential:
        """
        Exchange a scanned QR token for a credential.
        
        Args:
            token: QR session uid
            app: Login app identity the credential is bound to
            
        Returns:
            Credential built from the returned cookie triple
        """
        if app not in QRCODE_APPS:
            raise QRCodeLoginError(f"Unknown QR login app: {app}")
        
        response = await self._client.request(
            'POST',
            API_QRCODE_LOGIN.format(app=app),
            data={'account': token, 'app': app},
            with_cookie=False,
            error_cls=QRCodeLoginError
        )
        envelope = check_envelope(response, QRCodeLoginError)
        
        data = envelope.get('data') or {}
        cookie = data.get('cookie') if isinstance(data, dict) else None
        if not cookie:
            raise QRCodeLoginError("QR login response carries no cookie")
        
        return Credential.from_dict(cookie)
    
    async def check(self, credential: Credential) -> Optional[int]:
        """
        Check that a credential is alive.
        
        Args:
            credential: Credential to check
            
        Returns:
            User id reported by the provider
            
        Raises:
            LoginCheckFailed: If the check request fails or is rejected
        """
        try:
            response = await self._client.request(
                'GET',
                API_LOGIN_CHECK,
                headers={'Cookie': credential.cookie},
                with_cookie=False,
                error_cls=LoginCheckFailed
            )
            envelope = check_envelope(response, LoginCheckFailed)
        except LoginCheckFailed:
            raise
        except Pan115Error as e:
            raise LoginCheckFailed(f"Login check failed: {e}", e.error_code) from e
        
        data = envelope.get('data')
        if isinstance(data, dict) and data.get('user_id'):
            return int(data['user_id'])
        return credential.user_id
    
    async def qrcode_token(self) -> QRCodeSession:
        """
        Start a QR login.
        
        Returns:
            QRCodeSession whose uid becomes the QR token once scanned
        """
        response = await self._client.request(
            'GET',
            API_QRCODE_TOKEN,
            with_cookie=False,
            error_cls=QRCodeLoginError
        )
        envelope = check_envelope(response, QRCodeLoginError)
        try:
            return QRCodeSession.from_dict(envelope['data'])
        except (KeyError, TypeError, ValueError) as e:
            raise QRCodeLoginError(f"Malformed QR token response: {e}") from e
    
    async def qrcode_status(self, session: QRCodeSession) -> QRCodeStatus:
        """
        Poll the scan state of a QR login.
        
        Args:
            session: Session from qrcode_token()
            
        Returns:
            Current QRCodeStatus
        """
        response = await self._client.request(
            'GET',
            API_QRCODE_STATUS,
            params=session.to_params(),
            with_cookie=False,
            error_cls=QRCodeLoginError
        )
        envelope = check_envelope(response, QRCodeLoginError)
        data = envelope.get('data') or {}
        try:
            return QRCodeStatus(int(data.get('status', 0)))
        except (TypeError, ValueError) as e:
            raise QRCodeLoginError(f"Unknown QR code status: {data!r}") from e
