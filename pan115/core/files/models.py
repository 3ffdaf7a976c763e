"""File listing data models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional


def _parse_time(value: Any) -> Optional[datetime]:
    if value in (None, ''):
        return None
    text = str(value)
    if text.isdigit():
        return datetime.fromtimestamp(int(text))
    try:
        return datetime.strptime(text, '%Y-%m-%d %H:%M')
    except ValueError:
        return None


@dataclass(frozen=True)
class FileEntry:
    """
    Read-only projection of a 115 file record.
    
    Attributes:
        file_id: File id (`fid`) or directory id (`cid`)
        name: Name (`n`)
        size: Size in bytes (`s`), 0 for directories
        pick_code: Pick code (`pc`) used by download operations
        parent_id: Parent directory id
        sha1: Content sha1 (`sha`), empty for directories
        is_dir: Whether the record is a directory
        modified: Last modification time, if reported
        raw: The original record
    """
    file_id: str
    name: str
    size: int
    pick_code: str
    parent_id: str
    sha1: str = ''
    is_dir: bool = False
    modified: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
    
    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'FileEntry':
        """
        Create from a record of the file-list API.
        
        Files carry `fid` and their parent in `cid`; directories carry
        their own id in `cid` and the parent in `pid`.
        """
        is_dir = not record.get('fid')
        if is_dir:
            file_id, parent_id = record['cid'], record.get('pid', '')
        else:
            file_id, parent_id = record['fid'], record.get('cid', '')
        
        return cls(
            file_id=str(file_id),
            name=str(record.get('n', '')),
            size=int(record.get('s') or 0),
            pick_code=str(record.get('pc', '')),
            parent_id=str(parent_id),
            sha1=str(record.get('sha', '')),
            is_dir=is_dir,
            modified=_parse_time(record.get('te') or record.get('t')),
            raw=dict(record)
        )
