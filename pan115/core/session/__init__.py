"""
Session module.

Credential model and its in-memory storage.
"""
from .models import Credential, QRCodeSession, QRCodeStatus
from .credential_store import CredentialStore

__all__ = [
    'Credential',
    'QRCodeSession',
    'QRCodeStatus',
    'CredentialStore',
]
