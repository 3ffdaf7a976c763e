"""Upload services."""
from .content import (
    PRE_HASH_SIZE,
    FileContentSource,
    StreamContentSource,
    as_content_source,
    compute_upload_hashes
)

__all__ = [
    'PRE_HASH_SIZE',
    'FileContentSource',
    'StreamContentSource',
    'as_content_source',
    'compute_upload_hashes'
]
