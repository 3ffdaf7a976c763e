"""
Session data models.

Contains the credential and QR login data classes.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Dict, Any

from ..exceptions import CredentialParseError


@dataclass(frozen=True)
class Credential:
    """
    115 login credential.
    
    Attributes:
        uid: UID cookie, shaped `<user_id>_<ssoent>_<timestamp>`
        cid: CID cookie
        seid: SEID cookie
    """
    uid: str
    cid: str
    seid: str
    
    @property
    def cookie(self) -> str:
        """Render the cookie header value."""
        return f"UID={self.uid};CID={self.cid};SEID={self.seid}"
    
    @property
    def user_id(self) -> Optional[int]:
        """User id encoded in the UID prefix, if any."""
        head = self.uid.split('_', 1)[0]
        return int(head) if head.isdigit() else None
    
    @classmethod
    def from_cookie(cls, cookie: str) -> 'Credential':
        """
        Parse a cookie string.
        
        Args:
            cookie: `;`-separated `name=value` pairs
            
        Returns:
            Credential instance
            
        Raises:
            CredentialParseError: If UID, CID or SEID is missing
        """
        values: Dict[str, str] = {}
        for part in (cookie or '').split(';'):
            if '=' not in part:
                continue
            name, value = part.split('=', 1)
            values[name.strip().upper()] = value.strip()
        
        missing = [name for name in ('UID', 'CID', 'SEID') if not values.get(name)]
        if missing:
            raise CredentialParseError(
                f"Cookie is missing required field(s): {', '.join(missing)}"
            )
        
        return cls(
            uid=values['UID'],
            cid=values['CID'],
            seid=values['SEID']
        )
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Credential':
        """
        Create from the `cookie` object of a login response.
        
        Raises:
            CredentialParseError: If UID, CID or SEID is missing
        """
        try:
            return cls(
                uid=str(data['UID']),
                cid=str(data['CID']),
                seid=str(data['SEID'])
            )
        except (KeyError, TypeError) as e:
            raise CredentialParseError(f"Incomplete credential: {e}") from e
    
    def __repr__(self) -> str:
        return f"Credential(uid={self.uid!r}, cid=..., seid=...)"


class QRCodeStatus(IntEnum):
    """Scan state of a QR login session."""
    EXPIRED = -1
    CANCELED = -2
    WAITING = 0
    SCANNED = 1
    SIGNED_IN = 2


@dataclass
class QRCodeSession:
    """
    QR login session issued by the token endpoint.
    
    The `uid` is the QR token later exchanged for a credential.
    """
    uid: str
    time: int
    sign: str
    qrcode: str = ''
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QRCodeSession':
        """Create from the `data` object of a token response."""
        return cls(
            uid=str(data['uid']),
            time=int(data['time']),
            sign=str(data['sign']),
            qrcode=str(data.get('qrcode') or '')
        )
    
    def to_params(self) -> Dict[str, Any]:
        """Query parameters for the status endpoint."""
        return {'uid': self.uid, 'time': self.time, 'sign': self.sign}
