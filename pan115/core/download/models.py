"""Download data models."""
from dataclasses import dataclass, field
from typing import Dict, Any


@dataclass
class DownloadDescriptor:
    """
    Signed download descriptor.
    
    The URL is valid for a short server-defined window. Byte-range fetches
    must replay `headers`, which pin the cookie and User-Agent the URL was
    signed for.
    
    Attributes:
        url: Signed download URL
        file_name: File name
        file_size: Size in bytes
        pick_code: Pick code the URL was resolved for
        file_id: Provider file id
        headers: Header set of the signing request
    """
    url: str
    file_name: str
    file_size: int
    pick_code: str
    file_id: str = ''
    headers: Dict[str, str] = field(default_factory=dict)
    
    @classmethod
    def from_info(
        cls,
        file_id: str,
        info: Dict[str, Any],
        headers: Dict[str, str]
    ) -> 'DownloadDescriptor':
        """Create from one entry of a decoded download-info map."""
        url = info.get('url')
        if isinstance(url, dict):
            url = url.get('url')
        return cls(
            url=str(url or ''),
            file_name=str(info.get('file_name', '')),
            file_size=int(info.get('file_size') or 0),
            pick_code=str(info.get('pick_code', '')),
            file_id=str(file_id),
            headers=dict(headers)
        )
