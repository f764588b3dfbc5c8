#core/entities/__init__.py
"""
Entidades do domínio - representam conceitos do negócio.
Todas são imutáveis (frozen=True) para garantir integridade.
"""

from .token import TokenClaims, IssuedToken, VerifiedToken
from .user import UserAccount, LoginResult
from .event import AuthEventType

__all__ = [
    'TokenClaims', 'IssuedToken', 'VerifiedToken',
    'UserAccount', 'LoginResult',
    'AuthEventType'
]
