"""以回调身份区分订阅的事件处理器列表。"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional

from core.delivery import DeliveryReport, ErrorHandler, deliver

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class HandlerList:
    """subscribe(fn) / unsubscribe(fn) / fire(payload)。

    不发放令牌，回调本身即订阅标识；同一回调可多次注册，
    退订时全部移除。
    """

    def __init__(
        self,
        name: str = "handlers",
        *,
        on_error: Optional[ErrorHandler] = None,
        log_subscriber_errors: bool = True,
    ) -> None:
        self.name = name
        self.on_error = on_error
        self.log_subscriber_errors = log_subscriber_errors
        self._handlers: List[Handler] = []
        self._lock = threading.RLock()

    def subscribe(self, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError("handler must be callable")
        with self._lock:
            self._handlers.append(handler)

    def unsubscribe(self, handler: Handler) -> int:
        """移除所有同一引用的回调，返回移除数量。"""

        with self._lock:
            kept = [item for item in self._handlers if item is not handler]
            removed = len(self._handlers) - len(kept)
            self._handlers = kept
        if not removed:
            LOGGER.debug("%s: handler %r was not subscribed", self.name, handler)
        return removed

    def fire(self, payload: Any = None) -> DeliveryReport:
        with self._lock:
            snapshot = tuple(self._handlers)
        return deliver(
            self.name,
            snapshot,
            lambda handler: handler(payload),
            on_error=self.on_error,
            log_errors=self.log_subscriber_errors,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)


__all__ = ["Handler", "HandlerList"]
