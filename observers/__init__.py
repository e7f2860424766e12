"""Observer-style notification primitives."""

from .handlers import HandlerList
from .observer_list import IndexedObserverList
from .subject import Observer, Subject

__all__ = ["HandlerList", "IndexedObserverList", "Observer", "Subject"]
