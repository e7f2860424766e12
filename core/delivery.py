"""快照投递：代理、Subject 与 HandlerList 共用的扇出逻辑。

调用方在锁内取得快照后，于锁外调用本模块；每个目标的调用相互隔离，
一个订阅者失败不会阻止后续订阅者收到同一次通知。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Tuple, TypeVar

from core.errors import SubscriberFailureError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DeliveryFailure:
    """单个订阅者的失败记录。"""

    topic: str
    target: Any
    error: Exception

    @property
    def token(self) -> Optional[str]:
        """代理订阅的令牌；观察者类目标返回 None。"""

        return getattr(self.target, "token", None)


@dataclass(frozen=True, slots=True)
class DeliveryReport:
    """一次 publish/notify/fire 的结果。"""

    topic: str
    delivered: int = 0
    failures: Tuple[DeliveryFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> "DeliveryReport":
        if self.failures:
            raise SubscriberFailureError(self.topic, self.failures)
        return self


ErrorHandler = Callable[[DeliveryFailure], None]


def deliver(
    topic: str,
    targets: Iterable[T],
    invoke: Callable[[T], None],
    *,
    on_error: Optional[ErrorHandler] = None,
    log_errors: bool = True,
) -> DeliveryReport:
    """依次对快照中的每个目标调用 ``invoke``，汇总失败。

    ``delivered`` 统计被调用的目标数，包括抛出异常的目标。
    """

    delivered = 0
    failures = []
    for target in targets:
        delivered += 1
        try:
            invoke(target)
        except Exception as exc:
            failure = DeliveryFailure(topic=topic, target=target, error=exc)
            failures.append(failure)
            if log_errors:
                LOGGER.exception("Subscriber %r failed on topic %r", target, topic)
            if on_error is not None:
                _report(on_error, failure)
    return DeliveryReport(topic=topic, delivered=delivered, failures=tuple(failures))


def _report(on_error: ErrorHandler, failure: DeliveryFailure) -> None:
    try:
        on_error(failure)
    except Exception:
        LOGGER.exception("Error handler failed while reporting topic %r", failure.topic)


__all__ = ["DeliveryFailure", "DeliveryReport", "ErrorHandler", "deliver"]
