"""Tests for API and session configuration."""
import aiohttp

from pan115.core.api import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, SessionConfig
from pan115.core.api.endpoints import FILE_LIST_LIMIT, UA_115_BROWSER


class TestProxyConfig:
    """Tests for ProxyConfig."""
    
    def test_no_url(self):
        """Test empty proxy."""
        assert ProxyConfig().to_aiohttp_proxy() is None
    
    def test_plain_url(self):
        """Test URL without credentials."""
        assert ProxyConfig(url='http://proxy:8080').to_aiohttp_proxy() == 'http://proxy:8080'
    
    def test_credentials_in_url(self):
        """Test credentials are inserted into the URL."""
        proxy = ProxyConfig(url='http://proxy:8080', username='u', password='p')
        
        assert proxy.to_aiohttp_proxy() == 'http://u:p@proxy:8080'


class TestSSLConfig:
    """Tests for SSLConfig."""
    
    def test_insecure(self):
        """Test verify=False disables verification."""
        assert SSLConfig(verify=False).create_ssl_context() is False
    
    def test_default_context(self):
        """Test default config builds a verifying context."""
        context = SSLConfig().create_ssl_context()
        
        assert context.check_hostname is True


class TestAPIConfig:
    """Tests for APIConfig."""
    
    def test_default_user_agent(self):
        """Test default UA is the 115 browser UA."""
        assert APIConfig.default().user_agent == UA_115_BROWSER
    
    def test_with_proxy(self):
        """Test proxy factory."""
        config = APIConfig.with_proxy('http://proxy:8080')
        
        assert config.proxy.url == 'http://proxy:8080'
    
    def test_insecure(self):
        """Test insecure factory."""
        config = APIConfig.insecure()
        
        assert config.get_connector_kwargs()['ssl'] is False
    
    def test_session_kwargs(self):
        """Test session kwargs carry headers and timeout."""
        config = APIConfig(extra_headers={'X-Test': '1'}, timeout=TimeoutConfig(total=10))
        
        kwargs = config.get_session_kwargs()
        
        assert kwargs['headers']['User-Agent'] == UA_115_BROWSER
        assert kwargs['headers']['X-Test'] == '1'
        assert isinstance(kwargs['timeout'], aiohttp.ClientTimeout)
        assert kwargs['timeout'].total == 10


class TestSessionConfig:
    """Tests for SessionConfig."""
    
    def test_defaults(self):
        """Test default values."""
        config = SessionConfig()
        
        assert config.cookie == ''
        assert config.qrcode_token == ''
        assert config.qrcode_source == 'web'
        assert config.page_size == FILE_LIST_LIMIT
        assert config.max_signature_retries == 2
    
    def test_effective_page_size_non_positive(self):
        """Test non-positive sizes fall back to the provider limit."""
        config = SessionConfig()
        
        assert config.effective_page_size(0) == 1000
        assert config.effective_page_size(-5) == 1000
    
    def test_effective_page_size_explicit(self):
        """Test explicit positive size wins."""
        assert SessionConfig(page_size=50).effective_page_size(20) == 20
    
    def test_effective_page_size_configured(self):
        """Test None uses the configured size."""
        assert SessionConfig(page_size=50).effective_page_size() == 50
        assert SessionConfig(page_size=0).effective_page_size() == 1000
