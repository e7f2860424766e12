"""代理层异常定义。"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from core.delivery import DeliveryFailure


class BrokerError(Exception):
    """所有代理相关异常的基类。"""


class SubscriberFailureError(BrokerError):
    """一次投递中有订阅者抛出异常，汇总所有失败。"""

    def __init__(self, topic: str, failures: Sequence["DeliveryFailure"]) -> None:
        self.topic = topic
        self.failures = tuple(failures)
        super().__init__(f"{len(self.failures)} subscriber(s) failed on topic {topic!r}")


class ObserverIndexError(BrokerError, IndexError):
    """按位置删除观察者时下标越界。"""

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(f"observer index {index} out of range (count={count})")


__all__ = ["BrokerError", "SubscriberFailureError", "ObserverIndexError"]
