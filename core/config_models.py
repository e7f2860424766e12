"""Configuration models for the broker and the demo runner."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class BrokerConfig:
    """Token format and failure reporting for a broker instance."""

    token_prefix: str = ""
    token_start: int = 0
    log_subscriber_errors: bool = True

    def __post_init__(self) -> None:
        self.token_start = int(self.token_start)
        if self.token_start < 0:
            raise ValueError("broker.token_start must be >= 0")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, object]]) -> "BrokerConfig":
        if not data:
            return cls()
        return cls(**data)


@dataclass
class LoggingConfig:
    """Root logging level used by the CLI."""

    level: str = "INFO"

    def __post_init__(self) -> None:
        self.level = str(self.level).upper()
        if not isinstance(logging.getLevelName(self.level), int):
            raise ValueError(f"unknown logging level: {self.level}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, object]]) -> "LoggingConfig":
        if not data:
            return cls()
        return cls(**data)


@dataclass
class AppConfig:
    """Top level configuration model."""

    broker: BrokerConfig = field(default_factory=BrokerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, object]]) -> "AppConfig":
        if not data:
            return cls()
        return cls(
            broker=BrokerConfig.from_dict(data.get("broker")),
            logging=LoggingConfig.from_dict(data.get("logging")),
        )


__all__ = ["AppConfig", "BrokerConfig", "LoggingConfig"]
