"""
API configuration module.

Provides configuration for the 115 HTTP client and for a provider session.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import ssl

from .endpoints import FILE_LIST_LIMIT, UA_115_BROWSER, DEFAULT_QRCODE_APP


@dataclass
class ProxyConfig:
    """
    Proxy configuration.
    
    Supports HTTP, HTTPS, and SOCKS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    
    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None
        
        if self.username and self.password:
            # Insert credentials into URL
            if '://' in self.url:
                protocol, rest = self.url.split('://', 1)
                return f"{protocol}://{self.username}:{self.password}@{rest}"
        
        return self.url


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.
    
    `verify=False` is the equivalent of an insecure-skip-verify switch.
    """
    verify: bool = True
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    check_hostname: bool = True
    
    def create_ssl_context(self):
        """Create SSL context from configuration (False disables verification)."""
        if not self.verify:
            return False
        
        context = ssl.create_default_context()
        
        if self.ca_file:
            context.load_verify_locations(self.ca_file)
        
        if self.cert_file:
            context.load_cert_chain(
                self.cert_file,
                keyfile=self.key_file
            )
        
        context.check_hostname = self.check_hostname
        
        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.
    
    These are the only deadlines applied to requests; wrap calls in
    asyncio.wait_for() for anything tighter.
    """
    total: float = 300.0
    connect: float = 30.0
    sock_read: float = 60.0
    sock_connect: float = 30.0
    
    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class APIConfig:
    """
    HTTP client configuration.
    
    Centralizes transport options for the 115 API client.
    """
    user_agent: str = UA_115_BROWSER
    
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    
    extra_headers: Dict[str, str] = field(default_factory=dict)
    
    log_level: int = 20  # logging.INFO
    
    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100
    
    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()
    
    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )
    
    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Create configuration with SSL verification disabled."""
        return cls(
            ssl=SSLConfig(verify=False, check_hostname=False),
            **kwargs
        )
    
    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }
    
    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }
        
        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }


@dataclass
class SessionConfig:
    """
    Provider session configuration.
    
    Attributes:
        cookie: Raw cookie string (UID/CID/SEID)
        qrcode_token: One-shot QR login token (the QR session uid)
        qrcode_source: App identity the QR login is bound to
        page_size: Directory listing page size (<= 0 means provider default)
        user_agent: Default user agent of the session
        max_signature_retries: Signature challenges answered before giving up
    """
    cookie: str = ''
    qrcode_token: str = ''
    qrcode_source: str = DEFAULT_QRCODE_APP
    page_size: int = FILE_LIST_LIMIT
    user_agent: str = UA_115_BROWSER
    max_signature_retries: int = 2
    
    def effective_page_size(self, page_size: Optional[int] = None) -> int:
        """Resolve a page size, falling back to the provider limit."""
        size = self.page_size if page_size is None else page_size
        if size is None or size <= 0:
            return FILE_LIST_LIMIT
        return size
