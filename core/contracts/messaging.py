#core/contracts/messaging.py
"""Interface para sistema de mensagens/eventos."""
from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IEventObserver(Protocol):
    """Qualquer objeto com receive(event_type, payload) pode observar eventos."""

    def receive(self, event_type: str, payload: Any) -> None:
        ...


class ISystemEventBus(ABC):
    """Interface para o barramento de eventos do sistema."""

    @abstractmethod
    def subscribe(self, event_type: str, observer: IEventObserver) -> None:
        """Inscreve um observer para um tipo de evento."""
        pass

    @abstractmethod
    def publish(self, event_type: str, payload: Any) -> int:
        """Publica um evento para todos os seus assinantes, na ordem de inscrição.

        Returns:
            Número de observers notificados com sucesso
        """
        pass

    @abstractmethod
    def unsubscribe(self, event_type: str, observer: IEventObserver) -> None:
        """Remove uma inscrição do observer. Não faz nada se não existir."""
        pass
