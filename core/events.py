"""订阅与回调的公共类型。

代理、注册表与投递层通过这些共享类型通信，而非零散的元组或字典。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

Payload = TypeVar("Payload")

# 回调签名固定为 (topic, payload)
Callback = Callable[[str, Payload], None]


@dataclass(frozen=True, slots=True)
class Subscription(Generic[Payload]):
    """单条订阅：令牌、所属主题与回调。创建后不可修改。"""

    token: str
    topic: str
    callback: Callback[Payload]

    def __call__(self, payload: Payload) -> None:
        self.callback(self.topic, payload)


__all__ = ["Payload", "Callback", "Subscription"]
