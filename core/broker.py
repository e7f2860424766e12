"""多主题发布/订阅代理，用于解耦模块间通信。"""

from __future__ import annotations

import logging
import threading
from typing import Generic, Optional, Tuple

from core.config_models import BrokerConfig
from core.delivery import DeliveryReport, ErrorHandler, deliver
from core.events import Callback, Payload, Subscription
from core.registry import SubscriptionRegistry
from core.tokens import TokenAllocator

LOGGER = logging.getLogger(__name__)


class Broker(Generic[Payload]):
    """发布/订阅机制：订阅返回令牌，凭令牌退订，发布按快照同步投递。

    所有注册表修改与快照生成都在同一把锁内完成，回调在锁外执行，
    因此回调内部可以安全地再次订阅或退订。
    """

    def __init__(
        self,
        allocator: Optional[TokenAllocator] = None,
        *,
        on_error: Optional[ErrorHandler] = None,
        log_subscriber_errors: bool = True,
    ) -> None:
        self._registry = SubscriptionRegistry()
        self._allocator = allocator or TokenAllocator()
        self._lock = threading.RLock()
        self.on_error = on_error
        self.log_subscriber_errors = log_subscriber_errors

    @classmethod
    def from_config(
        cls, config: BrokerConfig, *, on_error: Optional[ErrorHandler] = None
    ) -> "Broker[Payload]":
        return cls(
            TokenAllocator(prefix=config.token_prefix, start=config.token_start),
            on_error=on_error,
            log_subscriber_errors=config.log_subscriber_errors,
        )

    def subscribe(self, topic: str, callback: Callback[Payload]) -> str:
        """注册主题回调，返回令牌。主题不存在时自动创建。"""

        if not callable(callback):
            raise TypeError("callback must be callable")
        with self._lock:
            token = self._allocator.allocate()
            self._registry.add(Subscription(token=token, topic=topic, callback=callback))
        LOGGER.debug("Subscribed %s to %r", token, topic)
        return token

    def unsubscribe(self, token: str) -> Optional[str]:
        """按令牌退订，成功返回该令牌，未找到返回 None。"""

        with self._lock:
            removed = self._registry.remove(token)
        if removed is None:
            LOGGER.debug("Unsubscribe of unknown token %s", token)
            return None
        LOGGER.debug("Unsubscribed %s from %r", token, removed.topic)
        return removed.token

    def unsubscribe_from(self, topic: str, token: str) -> Optional[str]:
        """只在指定主题内退订。"""

        with self._lock:
            removed = self._registry.remove_from(topic, token)
        if removed is None:
            LOGGER.debug("Token %s not subscribed to %r", token, topic)
            return None
        LOGGER.debug("Unsubscribed %s from %r", token, topic)
        return removed.token

    def publish(self, topic: str, payload: Payload) -> int:
        """将载荷分发给主题的订阅者，返回被调用的回调数。"""

        return self.publish_report(topic, payload).delivered

    def publish_report(self, topic: str, payload: Payload) -> DeliveryReport:
        """与 publish 相同，但返回包含失败明细的投递报告。"""

        with self._lock:
            snapshot = self._registry.snapshot(topic)
        if not snapshot:
            return DeliveryReport(topic=topic)
        report = deliver(
            topic,
            snapshot,
            lambda subscription: subscription(payload),
            on_error=self.on_error,
            log_errors=self.log_subscriber_errors,
        )
        if report.failures:
            LOGGER.warning(
                "Published %r to %d subscriber(s), %d failed",
                topic,
                report.delivered,
                len(report.failures),
            )
        return report

    def subscribers(self, topic: str) -> Tuple[Subscription, ...]:
        """便于测试/调试时查看订阅者。"""

        with self._lock:
            return self._registry.snapshot(topic)

    def topics(self) -> Tuple[str, ...]:
        with self._lock:
            return self._registry.topics()

    def has_topic(self, topic: str) -> bool:
        with self._lock:
            return self._registry.has_topic(topic)

    def subscription_count(self, topic: Optional[str] = None) -> int:
        with self._lock:
            return self._registry.count(topic)

    def clear(self) -> None:
        """移除全部订阅，主题保留。"""

        with self._lock:
            self._registry.clear()


__all__ = ["Broker"]
