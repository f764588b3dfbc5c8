#core/entities/token.py
"""Entidades de token - claims assinados e resultados de emissão/verificação."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TokenClaims(BaseModel):
    """Payload de um token compacto (JWT) como trafega no fio."""
    model_config = ConfigDict(frozen=True, strict=True)

    sub: str = Field(min_length=1, description="Identidade do sujeito")
    iat: int = Field(ge=0, description="Emitido em (segundos desde epoch)")
    exp: int = Field(ge=0, description="Expira em (segundos desde epoch)")
    role: Optional[str] = None


class IssuedToken(BaseModel):
    """Token recém emitido, com os metadados que o emissor conhece."""
    model_config = ConfigDict(frozen=True)

    token: str
    subject: str
    issued_at: datetime
    expires_at: datetime
    role: Optional[str] = None


class VerifiedToken(BaseModel):
    """Resultado de uma verificação bem sucedida."""
    model_config = ConfigDict(frozen=True)

    subject: str
    issued_at: datetime
    expires_at: datetime
    role: Optional[str] = None
