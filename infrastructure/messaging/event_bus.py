#infrastructure/messaging/event_bus.py
"""Barramento de eventos local."""
import logging
import threading
import weakref
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.contracts.messaging import IEventObserver, ISystemEventBus

logger = logging.getLogger(__name__)


class CallbackObserver:
    """Adapta uma função handler(event_type, payload) para a interface de observer."""

    __slots__ = ['callback', 'name', '__weakref__']

    def __init__(self, callback: Callable[[str, Any], None], name: Optional[str] = None):
        if not callable(callback):
            raise TypeError("callback precisa ser chamável")
        self.callback = callback
        self.name = name or getattr(callback, '__name__', repr(callback))

    def receive(self, event_type: str, payload: Any) -> None:
        self.callback(event_type, payload)

    def __repr__(self) -> str:
        return f"CallbackObserver({self.name})"


class _Registration:
    """Entrada do registro: referência forte ou fraca a um observer."""

    __slots__ = ['_ref', 'weak']

    def __init__(self, observer: IEventObserver, weak: bool = False):
        self.weak = weak
        if weak:
            try:
                self._ref = weakref.ref(observer)
            except TypeError as e:
                raise TypeError(
                    f"Observer {observer!r} não suporta referência fraca"
                ) from e
        else:
            self._ref = observer

    def resolve(self) -> Optional[IEventObserver]:
        """Retorna o observer, ou None se a referência fraca morreu."""
        return self._ref() if self.weak else self._ref

    def matches(self, observer: IEventObserver) -> bool:
        target = self.resolve()
        return target is not None and (target is observer or target == observer)


def _describe(observer: Any) -> str:
    return getattr(observer, 'name', None) or type(observer).__name__


class LocalEventBus(ISystemEventBus):
    """
    Implementação em memória do barramento de eventos.

    O registro é copy-on-write: subscribe/unsubscribe trocam a tupla de
    inscrições sob lock e o publish entrega para um snapshot, então um
    observer pode se inscrever ou sair durante um publish sem afetar a
    entrega em andamento.

    Falhas de observers são isoladas por padrão (log + próxima entrega).
    Com isolate_failures=False a primeira exceção sobe para quem publicou
    e interrompe as entregas restantes.
    """

    __slots__ = ['handlers', 'lock', 'isolate_failures', 'stats']

    def __init__(self, isolate_failures: bool = True):
        self.handlers: Dict[str, Tuple[_Registration, ...]] = {}
        self.lock = threading.RLock()
        self.isolate_failures = isolate_failures

        self.stats = {
            'published': 0,
            'delivered': 0,
            'failures': 0,
            'pruned': 0
        }

    @staticmethod
    def _key(event_type: str) -> str:
        # Aceita Enums de string (AuthEventType) como chave
        key = getattr(event_type, 'value', event_type)
        if not isinstance(key, str) or not key:
            raise ValueError(f"Tipo de evento inválido: {event_type!r}")
        return key

    def subscribe(self, event_type: str, observer: IEventObserver, weak: bool = False) -> None:
        """
        Inscreve um observer para um tipo de evento.

        O mesmo observer inscrito duas vezes recebe o evento duas vezes.

        Args:
            event_type: Nome do evento
            observer: Objeto com receive(event_type, payload)
            weak: Guarda apenas referência fraca (o barramento não mantém o observer vivo)
        """
        key = self._key(event_type)
        if not callable(getattr(observer, 'receive', None)):
            raise TypeError(
                f"{observer!r} não implementa receive(event_type, payload); "
                f"use CallbackObserver para funções"
            )

        registration = _Registration(observer, weak=weak)
        with self.lock:
            self.handlers[key] = self.handlers.get(key, ()) + (registration,)

        logger.debug(f"Observer {_describe(observer)} inscrito para o evento '{key}'.")

    def unsubscribe(self, event_type: str, observer: IEventObserver) -> None:
        """Remove uma inscrição de um observer. Não faz nada se ela não existir."""
        key = self._key(event_type)
        with self.lock:
            current = self.handlers.get(key)
            if not current:
                return

            for index, registration in enumerate(current):
                if registration.matches(observer):
                    remaining = current[:index] + current[index + 1:]
                    if remaining:
                        self.handlers[key] = remaining
                    else:
                        del self.handlers[key]
                    logger.debug(f"Observer {_describe(observer)} removido do evento '{key}'.")
                    return

    def publish(self, event_type: str, payload: Any) -> int:
        """
        Publica um evento, acionando todos os observers inscritos em ordem.

        Returns:
            Número de observers que receberam o evento sem erro
        """
        key = self._key(event_type)
        with self.lock:
            snapshot = self.handlers.get(key, ())
            self.stats['published'] += 1

        if not snapshot:
            return 0

        logger.debug(f"Publicando evento '{key}' para {len(snapshot)} observer(s)")

        delivered = 0
        dead = 0
        try:
            for registration in snapshot:
                observer = registration.resolve()
                if observer is None:
                    dead += 1
                    continue

                try:
                    observer.receive(key, payload)
                    delivered += 1
                except Exception as e:
                    with self.lock:
                        self.stats['failures'] += 1
                    if not self.isolate_failures:
                        raise
                    logger.error(
                        f"Erro ao executar o observer {_describe(observer)} para o evento '{key}': {e}",
                        exc_info=True
                    )
        finally:
            with self.lock:
                self.stats['delivered'] += delivered
            if dead:
                self._prune(key)

        return delivered

    def _prune(self, event_type: str) -> None:
        """Remove inscrições fracas cujo observer já foi coletado."""
        with self.lock:
            current = self.handlers.get(event_type, ())
            alive = tuple(r for r in current if r.resolve() is not None)
            removed = len(current) - len(alive)
            if not removed:
                return
            if alive:
                self.handlers[event_type] = alive
            else:
                self.handlers.pop(event_type, None)
            self.stats['pruned'] += removed

        logger.debug(f"{removed} inscrição(ões) mortas removidas de '{event_type}'")

    def get_subscribers(self, event_type: str) -> List[IEventObserver]:
        """Retorna os observers vivos de um evento, na ordem de notificação."""
        key = self._key(event_type)
        with self.lock:
            snapshot = self.handlers.get(key, ())
        return [obs for obs in (r.resolve() for r in snapshot) if obs is not None]

    def get_stats(self) -> Dict[str, Any]:
        """Retorna estatísticas do barramento."""
        with self.lock:
            return {
                **self.stats,
                'event_types': len(self.handlers),
                'subscriptions': sum(len(regs) for regs in self.handlers.values())
            }

    def clear(self, event_type: Optional[str] = None) -> None:
        """Remove todas as inscrições (de um evento ou de todos)."""
        with self.lock:
            if event_type is None:
                self.handlers.clear()
                logger.info("Todas as inscrições do barramento foram removidas")
            else:
                self.handlers.pop(self._key(event_type), None)
