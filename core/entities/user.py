#core/entities/user.py
"""Entidades de usuário e de resultado de login."""
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field


class UserAccount(BaseModel):
    """Usuário registrado. A senha só existe na forma de hash."""
    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    password_hash: str = Field(repr=False)
    role: str = "USER"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LoginResult(BaseModel):
    """Resposta de um login bem sucedido."""
    model_config = ConfigDict(frozen=True)

    token: str = Field(repr=False)
    username: str
    role: str
    expires_at: datetime
