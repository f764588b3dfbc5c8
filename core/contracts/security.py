#core/contracts/security.py
"""Interfaces para emissão/verificação de tokens e hash de senhas."""
from abc import ABC, abstractmethod
from typing import Optional

from core.entities.token import IssuedToken, VerifiedToken


class ITokenIssuer(ABC):
    """Emite tokens assinados com validade limitada."""

    @abstractmethod
    def issue(self, identity: str, role: Optional[str] = None) -> str:
        """Retorna o token na serialização compacta."""
        pass

    @abstractmethod
    def issue_token(self, identity: str, role: Optional[str] = None) -> IssuedToken:
        """Emite o token e devolve também seus metadados."""
        pass


class ITokenVerifier(ABC):
    """Valida tokens sem consultar estado no servidor."""

    @abstractmethod
    def verify(self, token: str) -> VerifiedToken:
        """
        Verifica estrutura, assinatura e validade temporal.

        Raises:
            MalformedTokenError, InvalidSignatureError, ExpiredTokenError
        """
        pass


class IPasswordHasher(ABC):
    """Gera e confere hashes de senha."""

    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        pass
