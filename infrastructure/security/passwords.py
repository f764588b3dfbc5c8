#infrastructure/security/passwords.py
"""Hash de senhas com bcrypt."""
import logging

import bcrypt

from core.contracts.security import IPasswordHasher

logger = logging.getLogger(__name__)

# bcrypt só considera os primeiros 72 bytes da senha
BCRYPT_MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(IPasswordHasher):
    """Gera e confere hashes bcrypt (salt embutido no hash)."""

    def __init__(self, rounds: int = 12):
        if not 4 <= rounds <= 31:
            raise ValueError(f"rounds do bcrypt fora do intervalo 4..31: {rounds}")
        self.rounds = rounds

    @staticmethod
    def _encode(password: str) -> bytes:
        encoded = password.encode('utf-8')
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"Senha excede {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return encoded

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode('ascii')

    def verify(self, password: str, password_hash: str) -> bool:
        """Confere a senha. Hash corrompido conta como senha errada."""
        try:
            return bcrypt.checkpw(self._encode(password), password_hash.encode('ascii'))
        except ValueError as e:
            logger.warning(f"Verificação de senha rejeitada: {e}")
            return False
