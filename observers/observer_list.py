"""按位置访问的观察者列表。"""

from __future__ import annotations

from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

from core.errors import ObserverIndexError

T = TypeVar("T")


class IndexedObserverList(Generic[T]):
    """有序的观察者引用序列，由单个 Subject 独占。

    允许同一引用出现多次；查找按对象身份（``is``）而非相等比较。
    """

    def __init__(self) -> None:
        self._items: List[T] = []

    def add(self, observer: T) -> int:
        """追加到末尾，返回新的长度。"""

        self._items.append(observer)
        return len(self._items)

    def count(self) -> int:
        return len(self._items)

    def get(self, index: int) -> Optional[T]:
        """越界（含负数下标）返回 None。"""

        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def index_of(self, observer: T, start_index: int = 0) -> int:
        """从 ``start_index`` 开始线性查找，找不到返回 -1。"""

        i = max(start_index, 0)
        while i < len(self._items):
            if self._items[i] is observer:
                return i
            i += 1
        return -1

    def remove_at(self, index: int) -> T:
        """删除并返回指定位置的观察者，后续元素前移一位。"""

        if not 0 <= index < len(self._items):
            raise ObserverIndexError(index, len(self._items))
        return self._items.pop(index)

    def snapshot(self) -> Tuple[T, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())


__all__ = ["IndexedObserverList"]
