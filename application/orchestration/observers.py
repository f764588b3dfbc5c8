# application/orchestration/observers.py
"""Observers concretos para os eventos de autenticação."""
import logging
from typing import Any, Callable, Optional

from core.contracts.repository import IAuditRepository
from core.entities.event import AuthEventType

logger = logging.getLogger(__name__)


class EventLogObserver:
    """Registra no log todo evento recebido."""

    def __init__(self, level: int = logging.INFO, name: str = "event-log"):
        self.level = level
        self.name = name
        self.received = 0

    def receive(self, event_type: str, payload: Any) -> None:
        self.received += 1
        username = payload.get('username') if isinstance(payload, dict) else None
        if username:
            logger.log(self.level, f"📋 Evento {event_type} - usuário: {username}")
        else:
            logger.log(self.level, f"📋 Evento {event_type}")


class AuditTrailObserver:
    """Persiste os eventos no repositório de auditoria."""

    def __init__(self, repository: IAuditRepository, name: str = "audit-trail"):
        self.repository = repository
        self.name = name

    def receive(self, event_type: str, payload: Any) -> None:
        self.repository.save(event_type, payload)


class WelcomeNotificationObserver:
    """
    Envia mensagem de boas-vindas quando um usuário se registra.

    O envio real (e-mail, SMS, push) fica com o notifier injetado,
    chamado como notifier(destinatario, mensagem).
    """

    def __init__(self, notifier: Callable[[str, str], None],
                 template: str = "Bem-vindo(a), {username}!",
                 name: str = "welcome-notification"):
        self.notifier = notifier
        self.template = template
        self.name = name
        self.sent = 0

    def receive(self, event_type: str, payload: Any) -> None:
        if event_type != AuthEventType.USER_REGISTERED.value:
            return

        username: Optional[str] = payload.get('username') if isinstance(payload, dict) else None
        if not username:
            logger.warning("Evento de registro sem username, boas-vindas não enviadas")
            return

        self.notifier(username, self.template.format(username=username))
        self.sent += 1
