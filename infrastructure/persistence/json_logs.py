#infrastructure/persistence/json_logs.py
"""Repositório de auditoria em JSON Lines."""
import json
import logging
import threading
import time
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel

from core.contracts.repository import IAuditRepository

logger = logging.getLogger(__name__)

# Campos que nunca vão para o disco
REDACTED_FIELDS = frozenset({'password', 'password_hash', 'token', 'secret'})


class JsonAuditRepository(IAuditRepository):
    """
    Implementação de IAuditRepository que salva eventos em audit.jsonl.

    Eventos ficam em buffer e são escritos por flush(), chamado pela thread
    de escrita a cada flush_interval segundos (se background=True) e
    sempre no close().
    """

    __slots__ = ['log_dir', 'file_path', 'buffer', 'lock', 'flush_interval',
                 'running', 'writer_thread', '_saved', '_written', '_wakeup']

    def __init__(self, log_dir: str = 'logs', flush_interval: float = 5,
                 background: bool = True):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.file_path = self.log_dir / "audit.jsonl"

        self.buffer = deque()
        self.lock = threading.Lock()
        self.flush_interval = flush_interval

        self._saved = 0
        self._written = 0

        self.running = True
        self._wakeup = threading.Event()
        self.writer_thread = None
        if background and flush_interval > 0:
            self.writer_thread = threading.Thread(target=self._writer_loop, daemon=True)
            self.writer_thread.start()

        logger.info(
            f"JsonAuditRepository inicializado - arquivo: {self.file_path}, "
            f"flush_interval: {flush_interval}s, background: {self.writer_thread is not None}"
        )

    def _convert_to_serializable(self, obj: Any) -> Any:
        """Converte objetos complexos para formato serializável."""
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, BaseModel):
            return self._convert_to_serializable(obj.model_dump())
        if isinstance(obj, dict):
            return {
                str(k): ('***' if k in REDACTED_FIELDS else self._convert_to_serializable(v))
                for k, v in obj.items()
            }
        if isinstance(obj, (list, tuple, set, frozenset)):
            return [self._convert_to_serializable(item) for item in obj]
        if isinstance(obj, (str, int, float, bool, type(None))):
            return obj
        return str(obj)

    def save(self, event_type: str, payload: Any) -> None:
        """Coloca um evento no buffer de forma segura."""
        entry = {
            'event': getattr(event_type, 'value', event_type),
            'payload': self._convert_to_serializable(payload),
            '_saved_at': datetime.now(timezone.utc).isoformat()
        }

        with self.lock:
            self.buffer.append(entry)
            self._saved += 1

        if self._saved % 100 == 0:
            logger.debug(f"Eventos de auditoria salvos: {self._saved}")

    def _writer_loop(self) -> None:
        """Loop de escrita em background."""
        logger.debug("Thread de escrita de auditoria iniciada")

        while self.running:
            self._wakeup.wait(self.flush_interval)
            try:
                self.flush()
            except OSError as e:
                logger.error(f"Erro no loop de escrita de auditoria: {e}", exc_info=True)

        logger.debug("Thread de escrita de auditoria finalizada")

    def flush(self) -> None:
        """Move os eventos do buffer para o arquivo."""
        with self.lock:
            if not self.buffer:
                return
            batch = list(self.buffer)
            self.buffer.clear()

        start_time = time.perf_counter()
        with open(self.file_path, 'a', encoding='utf-8') as f:
            for item in batch:
                f.write(json.dumps(item, ensure_ascii=False))
                f.write('\n')

        with self.lock:
            self._written += len(batch)

        elapsed = time.perf_counter() - start_time
        if elapsed > 1.0:
            logger.warning(f"Flush demorou {elapsed:.2f}s para escrever {len(batch)} eventos")

    def close(self) -> None:
        """Finaliza o repositório garantindo que todos os eventos sejam salvos."""
        self.running = False
        self._wakeup.set()

        if self.writer_thread is not None and self.writer_thread.is_alive():
            self.writer_thread.join(timeout=self.flush_interval + 1)

        self.flush()
        logger.info(f"JsonAuditRepository finalizado - {self._written} eventos escritos")

    def get_statistics(self) -> Dict[str, Any]:
        """Retorna estatísticas do repositório."""
        with self.lock:
            stats = {
                'saved': self._saved,
                'written': self._written,
                'buffered': len(self.buffer),
                'file': str(self.file_path)
            }

        if self.file_path.exists():
            stats['size_bytes'] = self.file_path.stat().st_size
        else:
            stats['size_bytes'] = 0

        return stats
