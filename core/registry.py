"""主题到订阅列表的注册表。"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from core.events import Subscription


class SubscriptionRegistry:
    """纯数据结构：按主题注册顺序保存各主题的有序订阅列表。

    不加锁，由持有者（Broker）负责串行化访问。主题在首次订阅时创建，
    之后即使为空也会保留。令牌到主题的索引让查找与删除只需扫描一个主题。
    """

    def __init__(self) -> None:
        self._topics: Dict[str, List[Subscription]] = {}
        self._index: Dict[str, str] = {}  # token -> topic

    def ensure_topic(self, topic: str) -> List[Subscription]:
        return self._topics.setdefault(topic, [])

    def add(self, subscription: Subscription) -> None:
        """追加订阅；同一令牌重复注册视为编程错误。"""

        if subscription.token in self._index:
            raise ValueError(f"token {subscription.token!r} already registered")
        self.ensure_topic(subscription.topic).append(subscription)
        self._index[subscription.token] = subscription.topic

    def find(self, token: str) -> Optional[Subscription]:
        topic = self._index.get(token)
        if topic is None:
            return None
        for subscription in self._topics[topic]:
            if subscription.token == token:
                return subscription
        return None

    def remove(self, token: str) -> Optional[Subscription]:
        """删除令牌对应的订阅；找不到返回 None。"""

        topic = self._index.get(token)
        if topic is None:
            return None
        return self.remove_from(topic, token)

    def remove_from(self, topic: str, token: str) -> Optional[Subscription]:
        """只在指定主题内删除。"""

        if self._index.get(token) != topic:
            return None
        subscriptions = self._topics[topic]
        for index, subscription in enumerate(subscriptions):
            if subscription.token == token:
                del self._index[token]
                return subscriptions.pop(index)
        return None

    def snapshot(self, topic: str) -> Tuple[Subscription, ...]:
        """返回主题订阅列表的不可变快照。"""

        return tuple(self._topics.get(topic, ()))

    def topics(self) -> Tuple[str, ...]:
        return tuple(self._topics)

    def has_topic(self, topic: str) -> bool:
        return topic in self._topics

    def count(self, topic: Optional[str] = None) -> int:
        if topic is not None:
            return len(self._topics.get(topic, ()))
        return len(self._index)

    def clear(self) -> None:
        """清空所有订阅，但保留主题。"""

        for subscriptions in self._topics.values():
            subscriptions.clear()
        self._index.clear()


__all__ = ["SubscriptionRegistry"]
