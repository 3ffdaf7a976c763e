"""Download resolution module."""
from .models import DownloadDescriptor
from .service import DownloadService

__all__ = [
    'DownloadDescriptor',
    'DownloadService',
]
