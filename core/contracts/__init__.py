"""Contratos (interfaces) do domínio."""

from .messaging import IEventObserver, ISystemEventBus
from .security import ITokenIssuer, ITokenVerifier, IPasswordHasher
from .repository import ICredentialStore, IAuditRepository

__all__ = [
    'IEventObserver',
    'ISystemEventBus',
    'ITokenIssuer',
    'ITokenVerifier',
    'IPasswordHasher',
    'ICredentialStore',
    'IAuditRepository'
]
