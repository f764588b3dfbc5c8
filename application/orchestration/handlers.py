# application/orchestration/handlers.py
"""Inscrição dos observers de autenticação no barramento."""
import logging
from typing import List, Optional, Tuple

from core.contracts.messaging import IEventObserver, ISystemEventBus
from core.contracts.repository import IAuditRepository
from core.entities.event import AuthEventType
from .observers import AuditTrailObserver, EventLogObserver, WelcomeNotificationObserver

logger = logging.getLogger(__name__)


class AuthEventHandlers:
    """
    Gerencia os observers dos eventos de autenticação.
    Inscreve na criação e remove tudo em cleanup().
    """

    def __init__(self, event_bus: ISystemEventBus,
                 audit_repository: Optional[IAuditRepository] = None,
                 notifier=None):
        self.event_bus = event_bus
        self.subscriptions: List[Tuple[str, IEventObserver]] = []

        self.event_log = EventLogObserver()
        self.audit_trail = AuditTrailObserver(audit_repository) if audit_repository else None
        self.welcome = WelcomeNotificationObserver(notifier) if notifier else None

        self._subscribe_events()

    def _add(self, event_type: AuthEventType, observer: IEventObserver) -> None:
        self.event_bus.subscribe(event_type.value, observer)
        self.subscriptions.append((event_type.value, observer))

    def _subscribe_events(self):
        """Subscreve aos eventos relevantes."""
        for event_type in AuthEventType:
            self._add(event_type, self.event_log)
            if self.audit_trail:
                self._add(event_type, self.audit_trail)

        if self.welcome:
            self._add(AuthEventType.USER_REGISTERED, self.welcome)

        logger.info(f"AuthEventHandlers: {len(self.subscriptions)} inscrições no barramento")

    def cleanup(self):
        """Remove subscrições de eventos."""
        for event_type, observer in self.subscriptions:
            self.event_bus.unsubscribe(event_type, observer)
        self.subscriptions.clear()
