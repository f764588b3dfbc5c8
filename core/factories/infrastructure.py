#core/factories/infrastructure.py
"""Factory para criar componentes de infraestrutura."""
from typing import Dict, Any, Optional

from core.contracts.messaging import ISystemEventBus
from core.contracts.repository import ICredentialStore, IAuditRepository
from core.contracts.security import ITokenIssuer, ITokenVerifier, IPasswordHasher

from infrastructure.messaging.event_bus import LocalEventBus
from infrastructure.persistence.json_logs import JsonAuditRepository
from infrastructure.persistence.memory_users import InMemoryCredentialStore
from infrastructure.security.jwt_tokens import JwtTokenIssuer, JwtTokenVerifier, utc_now
from infrastructure.security.passwords import BcryptPasswordHasher


class InfrastructureFactory:
    """Factory para componentes de infraestrutura."""

    def __init__(self, config: Dict[str, Any], clock=utc_now):
        self.config = config
        self.clock = clock

    @property
    def _jwt_config(self) -> Dict[str, Any]:
        return self.config.get('security', {}).get('jwt', {})

    @staticmethod
    def _secret(value: Any) -> Optional[str]:
        # Segredos só com dígitos chegam do ambiente como int
        return None if value is None else str(value)

    def create_event_bus(self) -> ISystemEventBus:
        """Cria barramento de eventos."""
        isolate = self.config.get('events', {}).get('isolate_failures', True)
        return LocalEventBus(isolate_failures=isolate)

    def create_token_issuer(self) -> ITokenIssuer:
        """Cria emissor de tokens. Segredo fraco gera ConfigurationError."""
        jwt_config = self._jwt_config
        return JwtTokenIssuer(
            secret=self._secret(jwt_config.get('secret')),
            ttl_seconds=jwt_config.get('expiration_seconds', 86400),
            algorithm=jwt_config.get('algorithm', 'HS256'),
            clock=self.clock
        )

    def create_token_verifier(self) -> ITokenVerifier:
        """Cria verificador de tokens com o mesmo segredo do emissor."""
        jwt_config = self._jwt_config
        return JwtTokenVerifier(
            secret=self._secret(jwt_config.get('secret')),
            algorithm=jwt_config.get('algorithm', 'HS256'),
            leeway_seconds=jwt_config.get('leeway_seconds', 0),
            clock=self.clock
        )

    def create_password_hasher(self) -> IPasswordHasher:
        rounds = self.config.get('security', {}).get('password', {}).get('bcrypt_rounds', 12)
        return BcryptPasswordHasher(rounds=rounds)

    def create_credential_store(self) -> ICredentialStore:
        return InMemoryCredentialStore()

    def create_audit_repository(self) -> Optional[IAuditRepository]:
        """Cria repositório de auditoria (None se desabilitado)."""
        audit_config = self.config.get('audit', {})
        if not audit_config.get('enabled', True):
            return None

        return JsonAuditRepository(
            log_dir=self.config['system'].get('log_dir', 'logs'),
            flush_interval=audit_config.get('flush_interval', 5),
            background=audit_config.get('background', True)
        )
