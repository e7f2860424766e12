"""单主题观察者模式：Subject 维护观察者列表并广播状态变化。"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Protocol, Tuple, runtime_checkable

from core.delivery import DeliveryReport, ErrorHandler, deliver
from observers.observer_list import IndexedObserverList

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Observer(Protocol):
    """观察者统一接口。"""

    def update(self, context: Any) -> None:
        """接收 Subject 广播的上下文。"""


class Subject:
    """持有一个 IndexedObserverList，可视为只有一个隐式主题的代理。"""

    def __init__(
        self,
        name: str = "subject",
        *,
        on_error: Optional[ErrorHandler] = None,
        log_subscriber_errors: bool = True,
    ) -> None:
        self.name = name
        self._observers: IndexedObserverList[Observer] = IndexedObserverList()
        self.on_error = on_error
        self.log_subscriber_errors = log_subscriber_errors
        self._lock = threading.RLock()

    def add_observer(self, observer: Observer) -> int:
        """注册观察者，返回当前观察者数量；不去重。"""

        if not callable(getattr(observer, "update", None)):
            raise TypeError(f"{observer!r} does not implement update(context)")
        with self._lock:
            count = self._observers.add(observer)
        LOGGER.debug("%s: observer added (%d total)", self.name, count)
        return count

    def remove_observer(self, observer: Observer) -> bool:
        """移除第一个同一引用的观察者；不存在时什么都不做并返回 False。"""

        with self._lock:
            index = self._observers.index_of(observer, 0)
            if index == -1:
                return False
            self._observers.remove_at(index)
        LOGGER.debug("%s: observer removed", self.name)
        return True

    def notify(self, context: Any) -> DeliveryReport:
        """对快照中的每个观察者调用 update(context)。"""

        with self._lock:
            snapshot = self._observers.snapshot()
        return deliver(
            self.name,
            snapshot,
            lambda observer: observer.update(context),
            on_error=self.on_error,
            log_errors=self.log_subscriber_errors,
        )

    def snapshot(self) -> Tuple[Observer, ...]:
        with self._lock:
            return self._observers.snapshot()

    def __len__(self) -> int:
        with self._lock:
            return self._observers.count()


__all__ = ["Observer", "Subject"]
