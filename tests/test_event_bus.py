# tests/test_event_bus.py
"""Testes do barramento de eventos local."""
import gc
import logging
import threading

import pytest

from conftest import FailingObserver, RecordingObserver
from core.entities.event import AuthEventType
from infrastructure.messaging.event_bus import CallbackObserver, LocalEventBus


def test_publish_notifies_in_subscription_order(bus):
    log = []
    first = RecordingObserver("first", log)
    second = RecordingObserver("second", log)

    bus.subscribe("USER_REGISTERED", first)
    bus.subscribe("USER_REGISTERED", second)
    delivered = bus.publish("USER_REGISTERED", {"username": "alice"})

    assert delivered == 2
    assert [name for name, _, _ in log] == ["first", "second"]
    assert log[0][1:] == ("USER_REGISTERED", {"username": "alice"})


def test_publish_only_reaches_matching_event_type(bus):
    registered = RecordingObserver("registered")
    orders = RecordingObserver("orders")
    bus.subscribe("USER_REGISTERED", registered)
    bus.subscribe("ORDER_PLACED", orders)

    bus.publish("ORDER_PLACED", "Pedido #12345")

    assert registered.log == []
    assert orders.events == ["ORDER_PLACED"]


def test_same_observer_subscribed_twice_is_notified_twice(bus):
    observer = RecordingObserver()
    bus.subscribe("E", observer)
    bus.subscribe("E", observer)

    bus.publish("E", None)

    assert observer.events == ["E", "E"]


def test_unsubscribe_removes_a_single_registration(bus):
    observer = RecordingObserver()
    bus.subscribe("E", observer)
    bus.subscribe("E", observer)

    bus.unsubscribe("E", observer)
    bus.publish("E", None)

    assert observer.events == ["E"]


def test_unsubscribe_unknown_observer_is_a_noop(bus):
    subscribed = RecordingObserver("subscribed")
    stranger = RecordingObserver("stranger")
    bus.subscribe("E", subscribed)

    bus.unsubscribe("E", stranger)
    bus.unsubscribe("NEVER_REGISTERED", stranger)
    bus.publish("E", 1)

    assert subscribed.events == ["E"]
    assert stranger.log == []


def test_publish_without_subscribers_is_a_noop(bus):
    assert bus.publish("NOBODY_LISTENS", {"x": 1}) == 0
    assert bus.get_stats()['published'] == 1


def test_failing_observer_is_isolated_and_logged(bus, caplog):
    after = RecordingObserver("after")
    bus.subscribe("E", FailingObserver())
    bus.subscribe("E", after)

    with caplog.at_level(logging.ERROR, logger="infrastructure.messaging.event_bus"):
        delivered = bus.publish("E", "payload")

    assert delivered == 1
    assert after.events == ["E"]
    assert bus.get_stats()['failures'] == 1
    assert "observer quebrado" in caplog.text


def test_failure_aborts_remaining_notifications_when_not_isolated():
    bus = LocalEventBus(isolate_failures=False)
    after = RecordingObserver("after")
    bus.subscribe("E", FailingObserver())
    bus.subscribe("E", after)

    with pytest.raises(RuntimeError, match="observer quebrado"):
        bus.publish("E", None)

    assert after.log == []
    assert bus.get_stats()['failures'] == 1


def test_unsubscribe_during_publish_does_not_change_current_delivery(bus):
    log = []
    second = RecordingObserver("second", log)

    def remove_second(event_type, payload):
        log.append(("first", event_type, payload))
        bus.unsubscribe(event_type, second)

    bus.subscribe("E", CallbackObserver(remove_second))
    bus.subscribe("E", second)

    bus.publish("E", 1)
    bus.publish("E", 2)

    assert [(name, payload) for name, _, payload in log] == [
        ("first", 1), ("second", 1), ("first", 2)
    ]


def test_subscribe_rejects_objects_without_receive(bus):
    with pytest.raises(TypeError, match="CallbackObserver"):
        bus.subscribe("E", lambda event_type, payload: None)


def test_invalid_event_type_is_rejected(bus):
    with pytest.raises(ValueError):
        bus.subscribe("", RecordingObserver())


def test_weak_subscription_does_not_keep_observer_alive(bus):
    strong = RecordingObserver("strong")
    weak = RecordingObserver("weak")
    bus.subscribe("E", weak, weak=True)
    bus.subscribe("E", strong)

    del weak
    gc.collect()

    assert bus.publish("E", None) == 1
    assert strong.events == ["E"]
    stats = bus.get_stats()
    assert stats['pruned'] == 1
    assert stats['subscriptions'] == 1


def test_weak_subscription_can_be_unsubscribed(bus):
    observer = RecordingObserver()
    bus.subscribe("E", observer, weak=True)

    bus.unsubscribe("E", observer)

    assert bus.get_subscribers("E") == []


def test_string_enum_event_types_share_the_plain_string_key(bus):
    observer = RecordingObserver()
    bus.subscribe(AuthEventType.USER_REGISTERED, observer)

    bus.publish("USER_REGISTERED", {})

    assert observer.events == ["USER_REGISTERED"]


def test_get_subscribers_and_clear(bus):
    first = RecordingObserver("first")
    second = RecordingObserver("second")
    bus.subscribe("A", first)
    bus.subscribe("A", second)
    bus.subscribe("B", second)

    assert bus.get_subscribers("A") == [first, second]

    bus.clear("A")
    assert bus.get_subscribers("A") == []
    assert bus.get_subscribers("B") == [second]

    bus.clear()
    assert bus.get_stats()['subscriptions'] == 0


def test_concurrent_subscribe_and_publish_keep_registry_consistent(bus):
    observers = [RecordingObserver(f"obs-{i}") for i in range(200)]
    start = threading.Barrier(5)

    def subscribe_batch(batch):
        start.wait()
        for observer in batch:
            bus.subscribe("E", observer)

    def publish_loop():
        start.wait()
        for _ in range(50):
            bus.publish("E", None)

    threads = [
        threading.Thread(target=subscribe_batch, args=(observers[i::4],))
        for i in range(4)
    ]
    threads.append(threading.Thread(target=publish_loop))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(bus.get_subscribers("E")) == 200
    assert bus.publish("E", "final") == 200
    assert all(observer.log[-1][2] == "final" for observer in observers)
