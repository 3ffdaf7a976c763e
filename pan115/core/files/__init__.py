"""File listing module."""
from .models import FileEntry
from .service import FileListService

__all__ = [
    'FileEntry',
    'FileListService',
]
