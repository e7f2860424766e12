import sys
import threading
from pathlib import Path
from typing import Any, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.delivery import DeliveryFailure
from core.errors import ObserverIndexError
from observers import HandlerList, IndexedObserverList, Observer, Subject


class _Recorder:
    def __init__(self, name: str, log: List[Any]) -> None:
        self.name = name
        self.log = log

    def update(self, context: Any) -> None:
        self.log.append((self.name, context))


class _Broken:
    def update(self, context: Any) -> None:
        raise RuntimeError("cannot update")


def test_indexed_list_walkthrough() -> None:
    items: IndexedObserverList[object] = IndexedObserverList()
    o1, o2 = object(), object()
    assert items.add(o1) == 1
    assert items.add(o2) == 2
    assert items.index_of(o2, 0) == 1
    items.remove_at(0)
    assert items.count() == 1
    assert items.get(0) is o2


def test_get_out_of_bounds_returns_none() -> None:
    items: IndexedObserverList[object] = IndexedObserverList()
    items.add(object())
    assert items.get(-1) is None
    assert items.get(1) is None


def test_index_of_respects_start_and_identity() -> None:
    items: IndexedObserverList[Any] = IndexedObserverList()
    shared = [1]
    items.add(shared)
    items.add([1])
    items.add(shared)
    assert items.index_of(shared, 1) == 2
    assert items.index_of([1], 0) == -1
    assert items.index_of(shared, 3) == -1


def test_remove_at_out_of_bounds_raises() -> None:
    items: IndexedObserverList[object] = IndexedObserverList()
    items.add(object())
    with pytest.raises(ObserverIndexError):
        items.remove_at(-1)
    with pytest.raises(IndexError):
        items.remove_at(1)
    assert items.count() == 1


def test_subject_notifies_in_order() -> None:
    log: List[Any] = []
    subject = Subject()
    subject.add_observer(_Recorder("a", log))
    subject.add_observer(_Recorder("b", log))
    report = subject.notify(True)
    assert report.delivered == 2
    assert log == [("a", True), ("b", True)]


def test_remove_absent_observer_is_noop() -> None:
    log: List[Any] = []
    subject = Subject()
    present = _Recorder("a", log)
    subject.add_observer(present)
    assert subject.remove_observer(_Recorder("ghost", log)) is False
    assert len(subject) == 1
    assert subject.snapshot() == (present,)


def test_duplicate_observer_permitted() -> None:
    log: List[Any] = []
    subject = Subject()
    observer = _Recorder("a", log)
    subject.add_observer(observer)
    assert subject.add_observer(observer) == 2
    subject.notify("x")
    assert log == [("a", "x"), ("a", "x")]
    assert subject.remove_observer(observer) is True
    assert len(subject) == 1


def test_subject_rejects_objects_without_update() -> None:
    subject = Subject()
    with pytest.raises(TypeError):
        subject.add_observer(object())  # type: ignore[arg-type]


def test_observer_protocol_is_runtime_checkable() -> None:
    assert isinstance(_Recorder("a", []), Observer)
    assert not isinstance(object(), Observer)


def test_broken_observer_isolated() -> None:
    log: List[Any] = []
    subject = Subject("main", log_subscriber_errors=False)
    subject.add_observer(_Broken())
    subject.add_observer(_Recorder("b", log))
    report = subject.notify(1)
    assert report.delivered == 2
    assert len(report.failures) == 1
    assert report.failures[0].topic == "main"
    assert report.failures[0].token is None
    assert log == [("b", 1)]


def test_observer_removed_during_notify_receives_current() -> None:
    log: List[Any] = []
    subject = Subject()
    victim = _Recorder("victim", log)

    class _Remover:
        def update(self, context: Any) -> None:
            subject.remove_observer(victim)

    subject.add_observer(_Remover())
    subject.add_observer(victim)
    assert subject.notify("first").delivered == 2
    assert log == [("victim", "first")]
    assert subject.notify("second").delivered == 1


def test_handler_list_fire_and_unsubscribe() -> None:
    fired: List[Any] = []
    click = HandlerList("click")

    def handler(item: Any) -> None:
        fired.append(item)

    click.subscribe(handler)
    click.fire("event #1")
    assert click.unsubscribe(handler) == 1
    assert click.fire("event #2").delivered == 0
    click.subscribe(handler)
    click.fire("event #3")
    assert fired == ["event #1", "event #3"]


def test_handler_list_removes_every_copy() -> None:
    click = HandlerList()

    def handler(item: Any) -> None:
        return None

    click.subscribe(handler)
    click.subscribe(handler)
    assert click.unsubscribe(handler) == 2
    assert len(click) == 0
    assert click.unsubscribe(handler) == 0


def test_observer_added_during_notify_waits() -> None:
    log: List[Any] = []
    subject = Subject()
    late = _Recorder("late", log)

    class _Spawner:
        def update(self, context: Any) -> None:
            log.append(("spawner", context))
            subject.add_observer(late)

    subject.add_observer(_Spawner())
    assert subject.notify(1).delivered == 1
    assert log == [("spawner", 1)]
    assert subject.notify(2).delivered == 2
    assert log[-1] == ("late", 2)


def test_handler_list_failure_isolated() -> None:
    seen: List[DeliveryFailure] = []
    fired: List[Any] = []
    click = HandlerList("click", on_error=seen.append, log_subscriber_errors=False)

    def bad(item: Any) -> None:
        raise RuntimeError("bad handler")

    click.subscribe(bad)
    click.subscribe(fired.append)

    report = click.fire(1)

    assert report.delivered == 2
    assert fired == [1]
    assert len(report.failures) == 1
    assert report.failures[0].target is bad
    assert report.failures[0].topic == "click"
    assert seen == list(report.failures)


def test_handler_list_subscribe_during_fire_waits() -> None:
    fired: List[str] = []
    click = HandlerList()

    def late(item: Any) -> None:
        fired.append(f"late:{item}")

    def spawner(item: Any) -> None:
        fired.append(f"spawner:{item}")
        click.subscribe(late)

    click.subscribe(spawner)
    assert click.fire(1).delivered == 1
    assert fired == ["spawner:1"]
    click.unsubscribe(spawner)
    assert click.fire(2).delivered == 1
    assert fired[-1] == "late:2"


def test_handler_list_logging_switch(caplog: pytest.LogCaptureFixture) -> None:
    def bad(item: Any) -> None:
        raise RuntimeError("bad handler")

    quiet = HandlerList("quiet", log_subscriber_errors=False)
    quiet.subscribe(bad)
    with caplog.at_level("ERROR"):
        assert not quiet.fire(None).ok
    assert caplog.records == []

    loud = HandlerList("loud")
    loud.subscribe(bad)
    with caplog.at_level("ERROR"):
        loud.fire(None)
    assert any("failed on topic 'loud'" in record.getMessage() for record in caplog.records)


def test_subject_concurrent_add_remove_notify() -> None:
    subject = Subject(log_subscriber_errors=False)
    errors: List[BaseException] = []

    def worker() -> None:
        try:
            for _ in range(200):
                observer = _Recorder("w", [])
                subject.add_observer(observer)
                report = subject.notify(None)
                assert report.ok
                assert subject.remove_observer(observer) is True
        except BaseException as exc:  # pragma: no cover
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(subject) == 0


def test_handler_list_concurrent_subscribe_fire() -> None:
    click = HandlerList()
    errors: List[BaseException] = []

    def worker() -> None:
        try:
            for _ in range(200):
                def handler(item: Any) -> None:
                    return None

                click.subscribe(handler)
                click.fire(None)
                assert click.unsubscribe(handler) == 1
        except BaseException as exc:  # pragma: no cover
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(click) == 0
