"""Camada de infraestrutura."""

# Messaging
from .messaging.event_bus import LocalEventBus, CallbackObserver

# Security
from .security.jwt_tokens import JwtTokenIssuer, JwtTokenVerifier, extract_bearer_token
from .security.passwords import BcryptPasswordHasher

# Persistence
from .persistence.memory_users import InMemoryCredentialStore
from .persistence.json_logs import JsonAuditRepository

__all__ = [
    'LocalEventBus',
    'CallbackObserver',
    'JwtTokenIssuer',
    'JwtTokenVerifier',
    'extract_bearer_token',
    'BcryptPasswordHasher',
    'InMemoryCredentialStore',
    'JsonAuditRepository'
]
