"""Tests for API error mapping."""
import pytest

from pan115.core.api.errors import APIErrorCodes, check_envelope
from pan115.core.exceptions import (
    AuthError,
    DownloadError,
    ListError,
    Pan115APIError,
    RemoteFileNotFoundError,
    SessionExpiredError,
)


class TestAPIErrorCodes:
    """Tests for APIErrorCodes."""
    
    def test_known_message(self):
        """Test known errno has a message."""
        assert 'expired' in APIErrorCodes.get_message(990001)
    
    def test_unknown_message(self):
        """Test unknown errno."""
        assert APIErrorCodes.get_message(12345) == 'Unknown error: 12345'
    
    def test_kind_default(self):
        """Test unmapped errno falls back to default."""
        assert APIErrorCodes.get_kind(1, ListError) is ListError
    
    def test_kind_mapped(self):
        """Test mapped errno."""
        assert APIErrorCodes.get_kind(70005, ListError) is RemoteFileNotFoundError


class TestCheckEnvelope:
    """Tests for check_envelope."""
    
    def test_success(self):
        """Test truthy state passes through."""
        payload = {'state': True, 'data': [1]}
        
        assert check_envelope(payload) is payload
    
    def test_missing_state(self):
        """Test envelopes without state are accepted."""
        payload = {'data': 1}
        
        assert check_envelope(payload) is payload
    
    def test_not_a_dict(self):
        """Test non-dict payload raises the default kind."""
        with pytest.raises(DownloadError):
            check_envelope([1, 2], DownloadError)
    
    def test_default_kind(self):
        """Test unmapped errno raises the default kind with message and code."""
        with pytest.raises(ListError) as exc_info:
            check_envelope({'state': False, 'errno': 1234, 'error': 'boom'}, ListError)
        
        assert str(exc_info.value) == 'boom'
        assert exc_info.value.error_code == 1234
    
    def test_session_expired(self):
        """Test expired session errno."""
        with pytest.raises(SessionExpiredError):
            check_envelope({'state': False, 'errno': 990001}, ListError)
    
    def test_auth_kind(self):
        """Test verification errno maps to AuthError."""
        with pytest.raises(AuthError):
            check_envelope({'state': False, 'code': 911}, DownloadError)
    
    def test_not_found_carries_payload(self):
        """Test API errors keep the envelope."""
        payload = {'state': False, 'errNo': 50003, 'msg': 'gone'}
        
        with pytest.raises(RemoteFileNotFoundError) as exc_info:
            check_envelope(payload, DownloadError)
        
        assert isinstance(exc_info.value, Pan115APIError)
        assert exc_info.value.payload is payload
        assert str(exc_info.value) == 'gone'
    
    def test_message_from_table(self):
        """Test known errno without message text uses the table."""
        with pytest.raises(Pan115APIError) as exc_info:
            check_envelope({'state': False, 'errno': 20004})
        
        assert str(exc_info.value) == APIErrorCodes.get_message(20004)
