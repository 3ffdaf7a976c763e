"""
Directory listing service.

Walks the paginated file-list API and materializes the whole listing.
"""
from typing import Any, Dict, List, Optional

from ..api.async_client import AsyncAPIClient
from ..api.endpoints import API_FILE_LIST, FILE_LIST_LIMIT
from ..api.errors import check_envelope
from ..exceptions import ListError
from ..logging import get_logger
from .models import FileEntry


class FileListService:
    """
    Lists directory contents.
    
    Example:
        >>> service = FileListService(client)
        >>> entries = await service.list_files('0')
    """
    
    def __init__(self, client: AsyncAPIClient):
        """
        Initialize listing service.
        
        Args:
            client: Async API client
        """
        self._client = client
        self._logger = get_logger('pan115.files')
    
    async def list_files(
        self,
        directory_id: str = '0',
        page_size: Optional[int] = None
    ) -> List[FileEntry]:
        """
        List a directory.
        
        Args:
            directory_id: Directory id ('0' is the root)
            page_size: Page size; None or <= 0 uses FILE_LIST_LIMIT
            
        Returns:
            Entries in server order
            
        Raises:
            ListError: On transport, decode or application errors
        """
        limit = page_size if page_size and page_size > 0 else FILE_LIST_LIMIT
        entries: List[FileEntry] = []
        offset = 0
        
        while True:
            page = await self._fetch_page(directory_id, offset, limit)
            records = page.get('data') or []
            
            try:
                entries.extend(FileEntry.from_record(record) for record in records)
            except (KeyError, TypeError, ValueError) as e:
                raise ListError(f"Malformed file record in {directory_id}: {e}") from e
            
            offset += len(records)
            count = int(page.get('count') or 0)
            if not records or offset >= count:
                break
        
        self._logger.debug(f"Listed {len(entries)} entries in {directory_id}")
        return entries
    
    async def _fetch_page(self, directory_id: str, offset: int, limit: int) -> Dict[str, Any]:
        """Fetch one page of the listing."""
        params = {
            'aid': 1,
            'cid': directory_id,
            'offset': offset,
            'limit': limit,
            'show_dir': 1,
            'o': 'user_ptime',
            'asc': 0,
            'format': 'json',
        }
        response = await self._client.request(
            'GET',
            API_FILE_LIST,
            params=params,
            error_cls=ListError
        )
        return check_envelope(response, ListError)
