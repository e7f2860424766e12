from __future__ import annotations

"""Command line entry point running the broker demo scenarios."""

import argparse
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from core.config_loader import load_config
from demo.scenarios import SCENARIOS, run_scenarios

LOGGER = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Topic broker demo runner")
    parser.add_argument(
        "--demo",
        action="append",
        choices=sorted(SCENARIOS) + ["all"],
        help="Scenario to run (repeatable, 'all' runs every scenario)",
    )
    parser.add_argument("--list", action="store_true", help="List available scenarios")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--env", type=Path, default=None, help="Path to a .env file")
    return parser.parse_args(None if argv is None else list(argv))


def _selected(demos: List[str]) -> List[str]:
    if "all" in demos:
        return list(SCENARIOS)
    return list(dict.fromkeys(demos))


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    if args.list:
        for name, scenario in SCENARIOS.items():
            print(f"{name:10} {(scenario.__doc__ or '').strip()}")
        return 0

    config = load_config(config_path=args.config, env_path=args.env)
    configure_logging(config.logging.level)
    if not args.demo:
        raise SystemExit("Specify --demo NAME or --list")

    results = run_scenarios(_selected(args.demo), config.broker)
    for result in results:
        LOGGER.info("Scenario %s delivered %s", result.name, result.deliveries)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
