"""
Data models for the rapid upload module.

Uses dataclasses for the negotiation results and enums for its states.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Tuple

from ...exceptions import UploadError


class UploadDecision(Enum):
    """Final server decision of an upload-init negotiation."""
    ACCEPTED = 'accepted'
    MUST_UPLOAD = 'must_upload'


class NegotiationState(Enum):
    """
    States of an upload-init negotiation.
    
    INIT -> SENDING -> (CHALLENGED -> SENDING)* -> ACCEPTED | MUST_UPLOAD
    """
    INIT = 'init'
    SENDING = 'sending'
    CHALLENGED = 'challenged'
    ACCEPTED = 'accepted'
    MUST_UPLOAD = 'must_upload'


@dataclass(frozen=True)
class SignatureChallenge:
    """
    Byte-range proof requested by the server.
    
    Attributes:
        sign_key: Opaque challenge key, echoed back
        sign_check: Inclusive byte range as "start-end"
    """
    sign_key: str
    sign_check: str
    
    @property
    def byte_range(self) -> Tuple[int, int]:
        """Parsed inclusive (start, end) range."""
        try:
            start, end = (int(part) for part in self.sign_check.split('-', 1))
        except ValueError as e:
            raise UploadError(f"Malformed sign_check: {self.sign_check!r}") from e
        if start < 0 or end < start:
            raise UploadError(f"Invalid sign_check range: {self.sign_check!r}")
        return start, end
    
    @property
    def length(self) -> int:
        """Number of bytes to hash."""
        start, end = self.byte_range
        return end - start + 1
    
    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> 'SignatureChallenge':
        """Create from an upload-init reply."""
        return cls(
            sign_key=str(data.get('sign_key') or ''),
            sign_check=str(data.get('sign_check') or '')
        )


@dataclass
class UploadInitResult:
    """
    Result of an upload-init negotiation.
    
    When `decision` is MUST_UPLOAD, `bucket`, `object` and the callback
    pair describe where the caller has to send the bytes.
    """
    decision: UploadDecision
    status: int
    status_code: int = 0
    status_msg: str = ''
    pick_code: str = ''
    target: str = ''
    bucket: str = ''
    object: str = ''
    callback: str = ''
    callback_var: str = ''
    file_id: str = ''
    attempts: int = 1
    raw: Dict[str, Any] = field(default_factory=dict)
    
    @property
    def accepted(self) -> bool:
        """True if the server already holds the content."""
        return self.decision is UploadDecision.ACCEPTED
    
    @classmethod
    def from_response(
        cls,
        decision: UploadDecision,
        data: Dict[str, Any],
        file_id: str = '',
        attempts: int = 1
    ) -> 'UploadInitResult':
        """Create from a decoded upload-init reply."""
        callback = data.get('callback')
        if not isinstance(callback, dict):
            callback = {}
        return cls(
            decision=decision,
            status=int(data.get('status') or 0),
            status_code=int(data.get('statuscode') or 0),
            status_msg=str(data.get('statusmsg') or ''),
            pick_code=str(data.get('pickcode') or ''),
            target=str(data.get('target') or ''),
            bucket=str(data.get('bucket') or ''),
            object=str(data.get('object') or ''),
            callback=str(callback.get('callback') or ''),
            callback_var=str(callback.get('callback_var') or ''),
            file_id=file_id,
            attempts=attempts,
            raw=data
        )


@dataclass
class UploadInfo:
    """Per-credential upload identity."""
    user_id: int
    user_key: str


@dataclass
class NegotiationProgress:
    """Mutable state of one negotiation."""
    state: NegotiationState = NegotiationState.INIT
    attempts: int = 0
    challenges: int = 0
    sign_key: str = ''
    sign_val: str = ''
