"""Tests for the async authentication service."""
from unittest.mock import AsyncMock

import pytest

from pan115.core.api import AsyncAuthService, SessionConfig
from pan115.core.api.endpoints import API_LOGIN_CHECK, API_QRCODE_LOGIN
from pan115.core.exceptions import (
    CredentialParseError,
    LoginCheckFailed,
    MissingCredentialError,
    QRCodeLoginError,
)
from pan115.core.session import Credential, CredentialStore, QRCodeSession, QRCodeStatus

CHECK_OK = {'state': True, 'data': {'user_id': 42}}
QR_OK = {
    'state': True,
    'data': {'cookie': {'UID': '42_A1_1700000000', 'CID': 'cid', 'SEID': 'seid'}},
}


@pytest.fixture
def store():
    return CredentialStore()


@pytest.fixture
def auth(api_client, store):
    return AsyncAuthService(api_client, store)


class TestCookieLogin:
    """Tests for cookie login."""
    
    @pytest.mark.asyncio
    async def test_login_runs_liveness_check(self, auth, api_client, store, cookie):
        """Test cookie login checks the credential before returning."""
        api_client.request.return_value = CHECK_OK
        
        result = await auth.login(SessionConfig(cookie=cookie))
        
        api_client.request.assert_awaited_once()
        args, kwargs = api_client.request.call_args
        assert args == ('GET', API_LOGIN_CHECK)
        assert kwargs['headers'] == {'Cookie': cookie}
        assert result.user_id == 42
        assert store.get() == Credential('1', '2', '3')
        assert api_client.cookie == cookie
    
    @pytest.mark.asyncio
    async def test_failed_check_keeps_previous_credential(self, auth, api_client, store, cookie):
        """Test a rejected credential is not installed."""
        previous = Credential('9', '9', '9')
        store.set(previous)
        api_client.request.return_value = {'state': False, 'errno': 1}
        
        with pytest.raises(LoginCheckFailed):
            await auth.login(SessionConfig(cookie=cookie))
        
        assert store.get() is previous
    
    @pytest.mark.asyncio
    async def test_check_transport_error(self, auth, api_client, cookie):
        """Test transport failures surface as LoginCheckFailed."""
        api_client.request.side_effect = LoginCheckFailed('Network error: down')
        
        with pytest.raises(LoginCheckFailed):
            await auth.login(SessionConfig(cookie=cookie))
    
    @pytest.mark.asyncio
    async def test_check_expired_session(self, auth, api_client, cookie):
        """Test mapped errors are reported as LoginCheckFailed."""
        api_client.request.return_value = {'state': False, 'errno': 990001}
        
        with pytest.raises(LoginCheckFailed) as exc_info:
            await auth.login(SessionConfig(cookie=cookie))
        
        assert exc_info.value.error_code == 990001
    
    @pytest.mark.asyncio
    async def test_user_id_from_uid(self, auth, api_client):
        """Test user id falls back to the UID prefix."""
        api_client.request.return_value = {'state': True, 'data': {}}
        
        result = await auth.login(SessionConfig(cookie='UID=77_A1_1;CID=2;SEID=3'))
        
        assert result.user_id == 77
    
    @pytest.mark.asyncio
    async def test_missing_credential(self, auth, api_client):
        """Test neither token nor cookie."""
        with pytest.raises(MissingCredentialError):
            await auth.login(SessionConfig())
        
        api_client.request.assert_not_awaited()
    
    @pytest.mark.asyncio
    async def test_bad_cookie(self, auth, api_client):
        """Test incomplete cookie is rejected before any request."""
        with pytest.raises(CredentialParseError):
            await auth.login(SessionConfig(cookie='UID=1;CID=2'))
        
        api_client.request.assert_not_awaited()


class TestQRCodeLogin:
    """Tests for QR token login."""
    
    @pytest.mark.asyncio
    async def test_qrcode_login(self, auth, api_client, store):
        """Test QR token exchange synthesizes the cookie."""
        api_client.request.side_effect = [QR_OK, CHECK_OK]
        config = SessionConfig(qrcode_token='qr-uid', cookie='UID=old;CID=old;SEID=old')
        
        result = await auth.login(config)
        
        first_args, first_kwargs = api_client.request.call_args_list[0]
        assert first_args == ('POST', API_QRCODE_LOGIN.format(app='web'))
        assert first_kwargs['data'] == {'account': 'qr-uid', 'app': 'web'}
        assert config.cookie == 'UID=42_A1_1700000000;CID=cid;SEID=seid'
        assert config.qrcode_token == ''
        assert result.credential is store.get()
    
    @pytest.mark.asyncio
    async def test_token_not_reused_after_success(self, auth, api_client):
        """Test a second login uses the cookie, not the token."""
        api_client.request.side_effect = [QR_OK, CHECK_OK, CHECK_OK]
        config = SessionConfig(qrcode_token='qr-uid')
        
        await auth.login(config)
        await auth.login(config)
        
        urls = [call.args[1] for call in api_client.request.call_args_list]
        assert urls.count(API_QRCODE_LOGIN.format(app='web')) == 1
    
    @pytest.mark.asyncio
    async def test_token_cleared_on_failure(self, auth, api_client):
        """Test a failed exchange still consumes the token."""
        api_client.request.return_value = {'state': False, 'errno': 1, 'error': 'expired'}
        config = SessionConfig(qrcode_token='qr-uid')
        
        with pytest.raises(QRCodeLoginError):
            await auth.login(config)
        
        assert config.qrcode_token == ''
        with pytest.raises(MissingCredentialError):
            await auth.login(config)
    
    @pytest.mark.asyncio
    async def test_response_without_cookie(self, auth, api_client):
        """Test missing cookie object."""
        api_client.request.return_value = {'state': True, 'data': {}}
        
        with pytest.raises(QRCodeLoginError):
            await auth.login(SessionConfig(qrcode_token='qr-uid'))
    
    @pytest.mark.asyncio
    async def test_unknown_app(self, auth, api_client):
        """Test QR source app is validated."""
        with pytest.raises(QRCodeLoginError):
            await auth.login(SessionConfig(qrcode_token='qr-uid', qrcode_source='nope'))
        
        api_client.request.assert_not_awaited()
    
    @pytest.mark.asyncio
    async def test_qrcode_token(self, auth, api_client):
        """Test starting a QR login."""
        api_client.request.return_value = {
            'state': 1,
            'data': {'uid': 'u', 'time': 1700000000, 'sign': 's', 'qrcode': 'q'},
        }
        
        session = await auth.qrcode_token()
        
        assert session == QRCodeSession('u', 1700000000, 's', 'q')
    
    @pytest.mark.asyncio
    async def test_qrcode_status(self, auth, api_client):
        """Test polling a QR login."""
        api_client.request.return_value = {'state': 1, 'data': {'status': 2}}
        
        status = await auth.qrcode_status(QRCodeSession('u', 1, 's'))
        
        assert status is QRCodeStatus.SIGNED_IN
        assert api_client.request.call_args.kwargs['params'] == {'uid': 'u', 'time': 1, 'sign': 's'}
