#core/entities/event.py
"""Tipos de evento publicados pelo fluxo de autenticação."""
from enum import Enum


class AuthEventType(str, Enum):
    """Eventos de autenticação."""
    USER_REGISTERED = "USER_REGISTERED"
    USER_LOGGED_IN = "USER_LOGGED_IN"
    LOGIN_FAILED = "LOGIN_FAILED"
    TOKEN_REJECTED = "TOKEN_REJECTED"
