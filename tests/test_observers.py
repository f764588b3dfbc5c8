# tests/test_observers.py
"""Testes dos observers de autenticação e do repositório de auditoria."""
import json
import logging

import pytest

from application.orchestration.handlers import AuthEventHandlers
from application.orchestration.observers import EventLogObserver, WelcomeNotificationObserver
from infrastructure.persistence.json_logs import JsonAuditRepository


@pytest.fixture
def audit_repository(tmp_path):
    repository = JsonAuditRepository(log_dir=str(tmp_path), background=False)
    yield repository
    repository.close()


def _read_audit(repository):
    with open(repository.file_path, encoding='utf-8') as f:
        return [json.loads(line) for line in f]


def test_welcome_notification_only_on_registration():
    sent = []
    observer = WelcomeNotificationObserver(lambda to, message: sent.append((to, message)))

    observer.receive("USER_LOGGED_IN", {"username": "alice"})
    observer.receive("USER_REGISTERED", {"username": "alice"})

    assert sent == [("alice", "Bem-vindo(a), alice!")]
    assert observer.sent == 1


def test_event_log_observer_logs_each_event(caplog):
    observer = EventLogObserver()

    with caplog.at_level(logging.INFO, logger="application.orchestration.observers"):
        observer.receive("USER_LOGGED_IN", {"username": "alice"})
        observer.receive("TOKEN_REJECTED", {"reason": "ExpiredTokenError"})

    assert observer.received == 2
    assert "USER_LOGGED_IN - usuário: alice" in caplog.text
    assert "TOKEN_REJECTED" in caplog.text


def test_audit_repository_writes_json_lines_without_secrets(audit_repository):
    audit_repository.save("USER_LOGGED_IN", {"username": "alice", "token": "abc.def.ghi"})
    assert audit_repository.get_statistics()['buffered'] == 1

    audit_repository.flush()

    entries = _read_audit(audit_repository)
    assert len(entries) == 1
    assert entries[0]['event'] == "USER_LOGGED_IN"
    assert entries[0]['payload'] == {"username": "alice", "token": "***"}
    stats = audit_repository.get_statistics()
    assert stats['written'] == 1
    assert stats['buffered'] == 0


def test_handlers_wire_observers_and_cleanup(auth_service, bus, audit_repository):
    sent = []
    handlers = AuthEventHandlers(bus, audit_repository, notifier=lambda to, msg: sent.append(to))

    auth_service.register("alice", "correct-horse")
    auth_service.login("alice", "correct-horse")
    audit_repository.flush()

    assert sent == ["alice"]
    assert [entry['event'] for entry in _read_audit(audit_repository)] == [
        "USER_REGISTERED", "USER_LOGGED_IN"
    ]
    assert handlers.event_log.received == 2

    handlers.cleanup()
    assert bus.get_stats()['subscriptions'] == 0


def test_failing_notifier_does_not_break_registration(auth_service, bus, audit_repository):
    def broken_notifier(to, message):
        raise ConnectionError("smtp fora do ar")

    AuthEventHandlers(bus, audit_repository, notifier=broken_notifier)

    user = auth_service.register("alice", "correct-horse")

    assert user.username == "alice"
    assert bus.get_stats()['failures'] == 1
