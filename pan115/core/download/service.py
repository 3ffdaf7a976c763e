"""
Signed download resolution.

The pick code travels inside an M115 capsule keyed by a one-time key; the
reply is opened with the same key.
"""
import json
import time
from typing import Any, Iterable, Optional, Tuple

from ..api.async_client import AsyncAPIClient
from ..api.endpoints import API_DOWNLOAD_URL
from ..api.errors import check_envelope
from ..crypto import M115Cipher, ObfuscationCipher
from ..exceptions import (
    DownloadError,
    EmptyDownloadError,
    UnexpectedEmptyResponseError,
)
from ..logging import get_logger
from .models import DownloadDescriptor


def _entries(infos: Any) -> Iterable[Tuple[Any, Any]]:
    # An empty map is serialized as a JSON list
    if isinstance(infos, dict):
        return infos.items()
    if isinstance(infos, list):
        return enumerate(infos)
    raise DownloadError(f"Unexpected download info: {infos!r}")


class DownloadService:
    """
    Resolves pick codes into signed download descriptors.
    
    Example:
        >>> service = DownloadService(client)
        >>> descriptor = await service.resolve('abc123', user_agent)
    """
    
    def __init__(self, client: AsyncAPIClient, cipher: Optional[ObfuscationCipher] = None):
        """
        Initialize download service.
        
        Args:
            client: Async API client
            cipher: Obfuscation cipher (defaults to M115Cipher)
        """
        self._client = client
        self._cipher = cipher or M115Cipher()
        self._logger = get_logger('pan115.download')
    
    async def resolve(self, pick_code: str, user_agent: str) -> DownloadDescriptor:
        """
        Resolve a download descriptor.
        
        Args:
            pick_code: Pick code of the file
            user_agent: User-Agent the URL is signed for; the same value
                must be used for the byte fetch
                
        Returns:
            DownloadDescriptor carrying the request's header set
            
        Raises:
            DownloadError: Transport, decode or unmapped application error
            EmptyDownloadError: The server reports a negative file size
            UnexpectedEmptyResponseError: The reply holds no entries
        """
        key = self._cipher.generate_key()
        payload = json.dumps({'pickcode': pick_code}, separators=(',', ':')).encode('utf-8')
        capsule = self._cipher.encode(payload, key)
        
        response = await self._client.send(
            'POST',
            API_DOWNLOAD_URL,
            params={'t': int(time.time())},
            data={'data': capsule.decode('ascii')},
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
            user_agent=user_agent,
            error_cls=DownloadError
        )
        envelope = check_envelope(
            self._client.decode_json(response, DownloadError),
            DownloadError
        )
        
        encoded = envelope.get('data')
        if not encoded:
            raise UnexpectedEmptyResponseError(f"No download data for {pick_code}")
        
        try:
            infos = json.loads(self._cipher.decode(encoded, key))
        except ValueError as e:
            raise DownloadError(f"Cannot decode download info for {pick_code}: {e}") from e
        
        for file_id, info in _entries(infos):
            try:
                file_size = int(info.get('file_size') or 0)
            except (AttributeError, TypeError, ValueError) as e:
                raise DownloadError(f"Malformed download info for {pick_code}: {e}") from e
            if file_size < 0:
                raise EmptyDownloadError(f"File {pick_code} is not downloadable")
            descriptor = DownloadDescriptor.from_info(file_id, info, response.request_headers)
            self._logger.debug(f"Resolved download for {pick_code} ({file_size} bytes)")
            return descriptor
        
        raise UnexpectedEmptyResponseError(f"Empty download info for {pick_code}")
