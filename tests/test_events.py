import pytest

from delve.events import EventLog, EventType


def test_emit_records_in_order():
    log = EventLog()
    log.emit(EventType.MOVE, "a", 1, actor=0)
    log.emit(EventType.WAIT, "b", 2)
    assert [e.message for e in log.events()] == ["a", "b"]
    assert log.events(EventType.WAIT)[0].round == 2
    assert log.events()[0].data == {"actor": 0}
    assert len(log) == 2
    assert [e.message for e in log.since(1)] == ["b"]


def test_typed_and_catch_all_subscriptions():
    log = EventLog()
    typed, everything = [], []
    log.subscribe(typed.append, EventType.DEATH)
    log.subscribe(everything.append)
    log.emit(EventType.MOVE, "move", 0)
    log.emit(EventType.DEATH, "dead", 0)
    assert [e.message for e in typed] == ["dead"]
    assert [e.message for e in everything] == ["move", "dead"]

    log.unsubscribe(typed.append, EventType.DEATH)
    log.emit(EventType.DEATH, "again", 0)
    assert len(typed) == 1


def test_subscribe_requires_callable():
    with pytest.raises(TypeError):
        EventLog().subscribe("nope")


def test_clear():
    log = EventLog()
    log.emit(EventType.WAIT, "x", 0)
    log.clear()
    assert log.events() == []
