"""
Rapid upload module.

Negotiates hash-based instant uploads.
"""
from .negotiator import RapidUploadNegotiator, DEFAULT_MAX_SIGNATURE_RETRIES
from .models import (
    UploadDecision,
    NegotiationState,
    SignatureChallenge,
    UploadInitResult,
    UploadInfo
)
from .protocols import ContentSource
from .services import (
    PRE_HASH_SIZE,
    FileContentSource,
    StreamContentSource,
    as_content_source,
    compute_upload_hashes
)

__all__ = [
    # Main classes
    'RapidUploadNegotiator',
    'DEFAULT_MAX_SIGNATURE_RETRIES',
    
    # Models
    'UploadDecision',
    'NegotiationState',
    'SignatureChallenge',
    'UploadInitResult',
    'UploadInfo',
    
    # Content
    'ContentSource',
    'PRE_HASH_SIZE',
    'FileContentSource',
    'StreamContentSource',
    'as_content_source',
    'compute_upload_hashes',
]
