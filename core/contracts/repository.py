#core/contracts/repository.py
"""Interfaces para repositórios de credenciais e de auditoria."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from core.entities.user import UserAccount


class ICredentialStore(ABC):
    """Armazena usuários registrados."""

    @abstractmethod
    def add(self, user: UserAccount) -> bool:
        """
        Adiciona um usuário.

        Returns:
            False se o username já existir (nada é alterado)
        """
        pass

    @abstractmethod
    def get(self, username: str) -> Optional[UserAccount]:
        """Retorna o usuário ou None."""
        pass

    @abstractmethod
    def exists(self, username: str) -> bool:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def list_usernames(self) -> List[str]:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class IAuditRepository(ABC):
    """Interface para repositórios de eventos de auditoria."""

    @abstractmethod
    def save(self, event_type: str, payload: Any) -> None:
        """Salva um evento."""
        pass

    @abstractmethod
    def flush(self) -> None:
        """Garante que todos os dados em buffer sejam salvos."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Fecha o repositório e libera recursos."""
        pass

    @abstractmethod
    def get_statistics(self) -> Dict[str, Any]:
        """Retorna estatísticas sobre o repositório."""
        pass
