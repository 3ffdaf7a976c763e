"""Upload models."""
from .upload_models import (
    UploadDecision,
    NegotiationState,
    NegotiationProgress,
    SignatureChallenge,
    UploadInitResult,
    UploadInfo
)

__all__ = [
    'UploadDecision',
    'NegotiationState',
    'NegotiationProgress',
    'SignatureChallenge',
    'UploadInitResult',
    'UploadInfo'
]
