"""Topic broker core: tokens, registry, delivery and configuration."""

from .broker import Broker
from .delivery import DeliveryFailure, DeliveryReport
from .errors import BrokerError, ObserverIndexError, SubscriberFailureError

__all__ = [
    "Broker",
    "BrokerError",
    "DeliveryFailure",
    "DeliveryReport",
    "ObserverIndexError",
    "SubscriberFailureError",
]
