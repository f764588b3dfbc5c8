# core/bootstrap/system.py
"""
Bootstrap do sistema de autenticação e eventos.
"""
import logging
from typing import Any, Callable, Dict, Optional

from config.settings import ConfigurationError, load_config
from core.factories.infrastructure import InfrastructureFactory
from core.factories.services import ServiceFactory
from infrastructure.messaging.event_bus import CallbackObserver
from infrastructure.security.jwt_tokens import utc_now

logger = logging.getLogger(__name__)


class SystemBootstrap:
    """Inicializa e configura todo o sistema."""

    def __init__(self, config_path: str = "config/config.yaml",
                 config: Optional[Dict[str, Any]] = None,
                 notifier: Optional[Callable[[str, str], None]] = None,
                 clock=utc_now):
        """
        Inicializa o bootstrap.

        Args:
            config_path: Caminho do arquivo de configuração
            config: Configuração já carregada (ignora config_path)
            notifier: Envio de boas-vindas para novos usuários
            clock: Fonte de tempo para emissão/verificação de tokens
        """
        self.config = config if config is not None else load_config(config_path)
        self.notifier = notifier
        self.clock = clock
        self.infrastructure = None
        self.services = None

    def initialize(self) -> bool:
        """Inicializa todos os componentes do sistema."""
        try:
            logger.info("🚀 Iniciando bootstrap do sistema...")

            if not self._init_infrastructure():
                return False

            if not self._init_services():
                return False

            if not self._validate_system():
                return False

            logger.info("✅ Sistema inicializado com sucesso")
            return True

        except Exception as e:
            logger.error(f"❌ Erro no bootstrap: {e}", exc_info=True)
            return False

    def _init_infrastructure(self) -> bool:
        """Inicializa componentes de infraestrutura."""
        try:
            logger.info("🔧 Inicializando infraestrutura...")

            factory = InfrastructureFactory(self.config, clock=self.clock)

            self.infrastructure = {
                'event_bus': factory.create_event_bus(),
                'token_issuer': factory.create_token_issuer(),
                'token_verifier': factory.create_token_verifier(),
                'password_hasher': factory.create_password_hasher(),
                'credential_store': factory.create_credential_store(),
                'audit_repository': factory.create_audit_repository()
            }

            logger.info(f"✓ {len(self.infrastructure)} componentes de infraestrutura prontos")
            return True

        except ConfigurationError as e:
            logger.error(f"Configuração inválida: {e}")
            return False
        except Exception as e:
            logger.error(f"Erro ao inicializar infraestrutura: {e}", exc_info=True)
            return False

    def _init_services(self) -> bool:
        """Inicializa os serviços."""
        try:
            logger.info("📊 Inicializando serviços...")

            factory = ServiceFactory(
                config=self.config,
                infrastructure=self.infrastructure,
                notifier=self.notifier
            )

            self.services = factory.create_all_services()

            logger.info(f"✓ {len(self.services)} serviços prontos")
            return True

        except Exception as e:
            logger.error(f"Erro ao inicializar serviços: {e}", exc_info=True)
            return False

    def _validate_system(self) -> bool:
        """Valida se o sistema está pronto."""
        logger.info("🔍 Validando sistema...")

        if not self.infrastructure:
            logger.error("Infraestrutura não inicializada")
            return False

        if not self.services:
            logger.error("Serviços não inicializados")
            return False

        # Testa comunicação básica
        event_bus = self.infrastructure['event_bus']
        test_event = "SYSTEM_TEST"
        received = []
        probe = CallbackObserver(lambda event_type, payload: received.append(payload), name="probe")

        event_bus.subscribe(test_event, probe)
        try:
            event_bus.publish(test_event, {"test": True})
        finally:
            event_bus.unsubscribe(test_event, probe)

        if not received:
            logger.error("Falha no teste de eventos")
            return False

        # Testa emissão + verificação com o segredo configurado
        token = self.infrastructure['token_issuer'].issue("system-probe")
        verified = self.infrastructure['token_verifier'].verify(token)
        if verified.subject != "system-probe":
            logger.error("Falha no teste de tokens")
            return False

        logger.info("✓ Sistema validado e pronto")
        return True

    @property
    def auth(self):
        """Atalho para o serviço de autenticação."""
        if not self.services:
            raise RuntimeError("Sistema não inicializado")
        return self.services['auth']

    def shutdown(self) -> None:
        """Encerra o sistema ordenadamente."""
        logger.info("🛑 Iniciando shutdown do sistema...")

        if self.services and 'event_handlers' in self.services:
            self.services['event_handlers'].cleanup()

        if self.infrastructure:
            repository = self.infrastructure.get('audit_repository')
            if repository is not None:
                repository.close()

        logger.info("✅ Sistema encerrado com sucesso")
