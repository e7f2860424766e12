"""订阅令牌分配器。"""

from __future__ import annotations

import itertools
import threading


class TokenAllocator:
    """在代理生命周期内发放唯一、可打印的令牌。

    令牌即递增计数器的十进制字符串，可加前缀；计数器从不回退，
    因此退订后的令牌不会被复用。
    """

    def __init__(self, prefix: str = "", start: int = 0) -> None:
        if start < 0:
            raise ValueError("token start must be >= 0")
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()
        self._issued = 0

    def allocate(self) -> str:
        """返回下一个令牌。"""

        with self._lock:
            value = next(self._counter)
            self._issued += 1
        return f"{self.prefix}{value}"

    @property
    def issued(self) -> int:
        return self._issued


__all__ = ["TokenAllocator"]
