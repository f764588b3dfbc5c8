# infrastructure/persistence/memory_users.py
"""Armazenamento de credenciais em memória."""
import logging
import threading
from typing import Dict, List, Optional

from core.contracts.repository import ICredentialStore
from core.entities.user import UserAccount

logger = logging.getLogger(__name__)


class InMemoryCredentialStore(ICredentialStore):
    """
    Implementação em memória do armazenamento de usuários.
    Thread-safe; usernames são comparados sem diferenciar maiúsculas.
    """

    __slots__ = ['users', 'lock']

    def __init__(self):
        self.users: Dict[str, UserAccount] = {}
        self.lock = threading.RLock()

    @staticmethod
    def _key(username: str) -> str:
        return username.strip().casefold()

    def add(self, user: UserAccount) -> bool:
        key = self._key(user.username)
        with self.lock:
            if key in self.users:
                return False
            self.users[key] = user

        logger.debug(f"Usuário '{user.username}' armazenado")
        return True

    def get(self, username: str) -> Optional[UserAccount]:
        with self.lock:
            return self.users.get(self._key(username))

    def exists(self, username: str) -> bool:
        with self.lock:
            return self._key(username) in self.users

    def count(self) -> int:
        with self.lock:
            return len(self.users)

    def list_usernames(self) -> List[str]:
        with self.lock:
            return [user.username for user in self.users.values()]

    def clear(self) -> None:
        with self.lock:
            removed = len(self.users)
            self.users.clear()
        logger.info(f"Armazenamento de credenciais limpo: {removed} usuários removidos")
