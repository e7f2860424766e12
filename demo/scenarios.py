"""Demo drivers that exercise the broker the way an application would.

Each scenario builds its own broker (or subject) from the supplied config,
wires a few subscribers, publishes some payloads and returns a small summary
that the CLI logs and the tests assert on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from core.broker import Broker
from core.config_models import BrokerConfig
from observers import HandlerList, Subject

LOGGER = logging.getLogger(__name__)


@dataclass
class ScenarioResult:
    """What a scenario delivered, for logging and assertions."""

    name: str
    deliveries: List[int] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)
    state: Dict[str, Any] = field(default_factory=dict)

    def log(self, line: str) -> None:
        self.lines.append(line)
        LOGGER.info("[%s] %s", self.name, line)


def inbox_scenario(config: Optional[BrokerConfig] = None) -> ScenarioResult:
    """Mail client: a preview pane and an unread counter share one topic."""

    result = ScenarioResult(name="inbox")
    broker: Broker[Any] = Broker.from_config(config or BrokerConfig())
    preview: Dict[str, str] = {}
    counter = {"unread": 0}

    def show_preview(topic: str, data: Any) -> None:
        if isinstance(data, dict):
            preview.update(sender=data.get("sender", ""), body=data.get("body", ""))
        result.log(f"A new message was received on {topic}")

    def bump_counter(topic: str, data: Any) -> None:
        counter["unread"] += 1

    def message_logger(topic: str, data: Any) -> None:
        result.log(f"Logging: {topic}: {data}")

    broker.subscribe("inbox/newMessage", show_preview)
    broker.subscribe("inbox/newMessage", bump_counter)
    logger_token = broker.subscribe("inbox/newMessage", message_logger)

    payloads: List[Any] = [
        {"sender": "hello@google.com", "body": "Hey there! How are you doing today?"},
        "hello world!",
        ["test", "a", "b", "c"],
    ]
    for payload in payloads:
        result.deliveries.append(broker.publish("inbox/newMessage", payload))

    broker.unsubscribe(logger_token)
    result.deliveries.append(
        broker.publish("inbox/newMessage", {"sender": "hello@google.com", "body": "Hey again!"})
    )

    result.state.update(preview=dict(preview), unread=counter["unread"])
    return result


def grid_scenario(config: Optional[BrokerConfig] = None) -> ScenarioResult:
    """Stock ticker: a grid component reacts to newly available quotes."""

    result = ScenarioResult(name="grid")
    broker: Broker[Any] = Broker.from_config(config or BrokerConfig())
    rows: List[Dict[str, Any]] = []

    def grid_update(topic: str, data: Any) -> None:
        if data is None:
            return
        rows.append(data)
        result.log(f"updated grid component with: {data['identifier']} @ {data['stockPrice']}")
        result.log(f"data last updated at: {datetime.now():%m/%d/%Y %H:%M:%S}")

    broker.subscribe("newDataAvailable", grid_update)
    quotes = [
        {"summary": "Apple made $5 billion", "identifier": "APPL", "stockPrice": 570.91},
        {"summary": "Microsoft made $20 million", "identifier": "MSFT", "stockPrice": 30.85},
        None,
    ]
    for quote in quotes:
        result.deliveries.append(broker.publish("newDataAvailable", quote))

    result.state["rows"] = [row["identifier"] for row in rows]
    return result


def clicks_scenario(config: Optional[BrokerConfig] = None) -> ScenarioResult:
    """Two users listen to mouse events; one later stops listening to clicks."""

    result = ScenarioResult(name="clicks")
    broker: Broker[Any] = Broker.from_config(config or BrokerConfig())

    def listener(who: str, kind: str) -> Callable[[str, Any], None]:
        def _callback(topic: str, data: Any) -> None:
            result.log(f"{who}'s callback for a mouse {kind} event: {data}")

        return _callback

    broker.subscribe("mouseClicked", listener("Bob", "clicked"))
    broker.subscribe("mouseHovered", listener("Bob", "hovered"))
    alice = broker.subscribe("mouseClicked", listener("Alice", "clicked"))

    result.deliveries.append(broker.publish("mouseClicked", {"data": "data1"}))
    result.deliveries.append(broker.publish("mouseHovered", {"data": "data2"}))
    result.state["removed"] = broker.unsubscribe_from("mouseClicked", alice)
    result.deliveries.append(broker.publish("mouseClicked", {"data": "data1"}))
    result.deliveries.append(broker.publish("mouseHovered", {"data": "data2"}))
    return result


class Checkbox:
    """A checkbox that mirrors the state of a controlling checkbox."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.checked = False

    def update(self, context: Any) -> None:
        self.checked = bool(context)


def checkbox_scenario(config: Optional[BrokerConfig] = None) -> ScenarioResult:
    """A main checkbox (the subject) toggles every dependent checkbox."""

    config = config or BrokerConfig()
    result = ScenarioResult(name="checkbox")
    main = Subject("mainCheckbox", log_subscriber_errors=config.log_subscriber_errors)
    boxes = [Checkbox(f"observer-{i}") for i in range(3)]
    for box in boxes:
        main.add_observer(box)

    result.deliveries.append(main.notify(True).delivered)
    result.log("checked: " + ", ".join(box.label for box in boxes if box.checked))

    main.remove_observer(boxes[0])
    result.deliveries.append(main.notify(False).delivered)
    result.log("checked: " + ", ".join(box.label for box in boxes if box.checked))

    result.state["checked"] = {box.label: box.checked for box in boxes}
    return result


def handlers_scenario(config: Optional[BrokerConfig] = None) -> ScenarioResult:
    """A click handler subscribed, removed and subscribed again."""

    result = ScenarioResult(name="handlers")
    config = config or BrokerConfig()
    click = HandlerList("click", log_subscriber_errors=config.log_subscriber_errors)

    def click_handler(item: Any) -> None:
        result.log(f"fired: {item}")

    click.subscribe(click_handler)
    result.deliveries.append(click.fire("event #1").delivered)
    click.unsubscribe(click_handler)
    result.deliveries.append(click.fire("event #2").delivered)
    click.subscribe(click_handler)
    result.deliveries.append(click.fire("event #3").delivered)
    return result


SCENARIOS: Dict[str, Callable[[Optional[BrokerConfig]], ScenarioResult]] = {
    "inbox": inbox_scenario,
    "grid": grid_scenario,
    "clicks": clicks_scenario,
    "checkbox": checkbox_scenario,
    "handlers": handlers_scenario,
}


def run_scenarios(names: List[str], config: Optional[BrokerConfig] = None) -> List[ScenarioResult]:
    results: List[ScenarioResult] = []
    for name in names:
        try:
            scenario = SCENARIOS[name]
        except KeyError:
            raise ValueError(f"unknown scenario: {name}") from None
        results.append(scenario(config))
    return results


__all__ = [
    "Checkbox",
    "SCENARIOS",
    "ScenarioResult",
    "run_scenarios",
    "inbox_scenario",
    "grid_scenario",
    "clicks_scenario",
    "checkbox_scenario",
    "handlers_scenario",
]
