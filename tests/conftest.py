# tests/conftest.py
"""Fixtures compartilhadas pelos testes."""
from datetime import datetime, timedelta, timezone

import pytest

from application.services.auth import AuthService
from infrastructure.messaging.event_bus import LocalEventBus
from infrastructure.persistence.memory_users import InMemoryCredentialStore
from infrastructure.security.jwt_tokens import JwtTokenIssuer, JwtTokenVerifier
from infrastructure.security.passwords import BcryptPasswordHasher

SECRET = "test-signing-secret-with-more-than-256-bits"


class FrozenClock:
    """Relógio controlado pelos testes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class RecordingObserver:
    """Guarda (nome, event_type, payload) numa lista compartilhada."""

    def __init__(self, name: str = "recorder", log=None):
        self.name = name
        self.log = log if log is not None else []

    def receive(self, event_type, payload):
        self.log.append((self.name, event_type, payload))

    @property
    def events(self):
        return [event_type for _, event_type, _ in self.log]


class FailingObserver:
    name = "failing"

    def receive(self, event_type, payload):
        raise RuntimeError("observer quebrado")


@pytest.fixture
def clock():
    # Instante "cheio" mais meio segundo, relativo a agora para tokens
    # continuarem válidos em verificadores que usam o relógio real
    base = datetime.now(timezone.utc).replace(microsecond=500000)
    return FrozenClock(base)


@pytest.fixture
def bus():
    return LocalEventBus()


@pytest.fixture
def issuer(clock):
    return JwtTokenIssuer(SECRET, clock=clock)


@pytest.fixture
def verifier(clock):
    return JwtTokenVerifier(SECRET, clock=clock)


@pytest.fixture
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def auth_service(bus, issuer, verifier, hasher):
    return AuthService(
        event_bus=bus,
        credential_store=InMemoryCredentialStore(),
        password_hasher=hasher,
        token_issuer=issuer,
        token_verifier=verifier
    )


@pytest.fixture
def test_config(tmp_path):
    """Configuração completa já carregada, apontando logs para tmp_path."""
    return {
        'system': {'log_dir': str(tmp_path / 'logs'), 'log_level': 'DEBUG', 'environment': 'test'},
        'security': {
            'jwt': {'secret': SECRET, 'algorithm': 'HS256', 'expiration_seconds': 3600, 'leeway_seconds': 0},
            'password': {'bcrypt_rounds': 4, 'min_length': 8},
            'default_role': 'USER'
        },
        'events': {'isolate_failures': True},
        'audit': {'enabled': True, 'flush_interval': 5, 'background': False}
    }
