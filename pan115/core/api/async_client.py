"""
Async 115 API client.

Thin aiohttp wrapper shared by every service of a provider session.
"""
import json
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Any, Type, Mapping
import aiohttp

from .config import APIConfig
from ..exceptions import Pan115Error


@dataclass
class RawResponse:
    """
    Undecoded HTTP response.
    
    Attributes:
        status: HTTP status code
        body: Raw response body
        request_headers: Header set the client chose for the request
            (no transport headers such as Host or Content-Length)
        url: Final request URL
    """
    status: int
    body: bytes
    request_headers: Dict[str, str] = field(default_factory=dict)
    url: str = ''
    
    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body)


class AsyncAPIClient:
    """
    Asynchronous 115 API client.
    
    Features:
    - Full async/await support
    - Configurable proxy, SSL, timeouts
    - Cookie and per-request User-Agent injection
    - Transport and decode failures surfaced as the caller's error kind
    
    Nothing is retried here: each call either returns or raises.
    
    Example:
        >>> async with AsyncAPIClient(APIConfig.default()) as client:
        ...     data = await client.request('GET', API_LOGIN_CHECK)
    """
    
    def __init__(self, config: Optional[APIConfig] = None):
        """
        Initialize async API client.
        
        Args:
            config: API configuration (uses defaults if not provided)
        """
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._cookie: str = ''
        self._closed = False
        
        from ..logging import get_logger
        self._logger = get_logger('pan115.api')
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)
    
    @property
    def cookie(self) -> str:
        """Cookie string sent with authenticated requests."""
        return self._cookie
    
    @cookie.setter
    def cookie(self, value: Optional[str]):
        self._cookie = value or ''
    
    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config
    
    async def __aenter__(self) -> 'AsyncAPIClient':
        """Async context manager entry."""
        await self._ensure_session()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
    
    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
            self._closed = False
        return self._session
    
    async def close(self):
        """Close client and release resources."""
        self._closed = True
        
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
        
        if self._connector and not self._connector.closed:
            await self._connector.close()
            self._connector = None
    
    def build_headers(
        self,
        headers: Optional[Mapping[str, str]] = None,
        user_agent: Optional[str] = None,
        with_cookie: bool = True
    ) -> Dict[str, str]:
        """
        Build request headers.
        
        Args:
            headers: Extra headers for this request
            user_agent: Overrides the configured User-Agent
            with_cookie: Attach the session cookie
            
        Returns:
            Header dict
        """
        result: Dict[str, str] = {}
        if with_cookie and self._cookie:
            result['Cookie'] = self._cookie
        if user_agent is not None:
            result['User-Agent'] = user_agent
        if headers:
            result.update(headers)
        return result
    
    def replay_headers(self, request_headers: Mapping[str, str]) -> Dict[str, str]:
        """
        Headers to replay on a follow-up request.
        
        Session defaults overlaid with the per-request headers. Headers the
        transport adds (Host, Content-Length, Accept-Encoding) are not included.
        """
        result = {'User-Agent': self._config.user_agent, **self._config.extra_headers}
        result.update(request_headers)
        return result
    
    async def send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        user_agent: Optional[str] = None,
        with_cookie: bool = True,
        error_cls: Type[Pan115Error] = Pan115Error
    ) -> RawResponse:
        """
        Send one HTTP request and read the whole body.
        
        Args:
            method: HTTP method
            url: Request URL
            params: Query string parameters
            data: Form mapping or raw body
            headers: Extra headers
            user_agent: Per-request User-Agent
            with_cookie: Attach the session cookie
            error_cls: Exception class for transport failures
            
        Returns:
            RawResponse with the request's header set attached
            
        Raises:
            Pan115Error: `error_cls` on network errors or HTTP status >= 400
        """
        session = await self._ensure_session()
        request_headers = self.build_headers(headers, user_agent, with_cookie)
        
        self._logger.debug(f"{method} {url} params={params}")
        
        try:
            async with session.request(
                method,
                url,
                params=params,
                data=data,
                headers=request_headers,
                proxy=self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
            ) as response:
                body = await response.read()
                status = response.status
                final_url = str(response.url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error on {method} {url}: {e}")
            raise error_cls(f"Network error: {e}") from e
        
        self._logger.debug(f"Response {status}: {body[:300]!r}")
        
        if status >= 400:
            raise error_cls(f"HTTP {status} from {url}", status)
        
        return RawResponse(status, body, self.replay_headers(request_headers), final_url)
    
    async def request(
        self,
        method: str,
        url: str,
        *,
        error_cls: Type[Pan115Error] = Pan115Error,
        **kwargs
    ) -> Any:
        """
        Send a request and decode a JSON response.
        
        Args:
            method: HTTP method
            url: Request URL
            error_cls: Exception class for transport and decode failures
            **kwargs: Passed to send()
            
        Returns:
            Decoded JSON
        """
        response = await self.send(method, url, error_cls=error_cls, **kwargs)
        return self.decode_json(response, error_cls)
    
    @staticmethod
    def decode_json(response: RawResponse, error_cls: Type[Pan115Error] = Pan115Error) -> Any:
        """Decode a RawResponse body, wrapping decode failures in `error_cls`."""
        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"Invalid JSON response from {response.url or 'server'}: {e}") from e
