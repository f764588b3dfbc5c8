# core/factories/services.py
"""Factory para criar serviços de autenticação."""
from typing import Dict, Any, Callable, Optional

from application.orchestration.handlers import AuthEventHandlers
from application.services.auth import AuthService


class ServiceFactory:
    """Factory para serviços de aplicação."""

    def __init__(self, config: Dict[str, Any], infrastructure: Dict[str, Any],
                 notifier: Optional[Callable[[str, str], None]] = None):
        """
        Inicializa a factory.

        Args:
            config: Configurações do sistema
            infrastructure: Componentes criados pela InfrastructureFactory
            notifier: Envio de boas-vindas notifier(destinatario, mensagem)
        """
        self.config = config
        self.infrastructure = infrastructure
        self.notifier = notifier

    def create_all_services(self) -> Dict[str, Any]:
        """Cria todos os serviços."""
        return {
            'event_handlers': self.create_event_handlers(),
            'auth': self.create_auth_service()
        }

    def create_auth_service(self) -> AuthService:
        security = self.config.get('security', {})
        return AuthService(
            event_bus=self.infrastructure['event_bus'],
            credential_store=self.infrastructure['credential_store'],
            password_hasher=self.infrastructure['password_hasher'],
            token_issuer=self.infrastructure['token_issuer'],
            token_verifier=self.infrastructure['token_verifier'],
            default_role=security.get('default_role', 'USER'),
            min_password_length=security.get('password', {}).get('min_length', 8)
        )

    def create_event_handlers(self) -> AuthEventHandlers:
        return AuthEventHandlers(
            event_bus=self.infrastructure['event_bus'],
            audit_repository=self.infrastructure.get('audit_repository'),
            notifier=self.notifier
        )
