#application/orchestration/__init__.py
"""Orquestração dos eventos de autenticação."""
from .handlers import AuthEventHandlers
from .observers import AuditTrailObserver, EventLogObserver, WelcomeNotificationObserver

__all__ = [
    'AuthEventHandlers',
    'AuditTrailObserver',
    'EventLogObserver',
    'WelcomeNotificationObserver'
]
