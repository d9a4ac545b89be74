#!/usr/bin/env python3
"""Replay the record/amend/delete lifecycle against an in-memory store.

Each step prints one JSON line with its outcome, so the output can be
diffed between configurations:

    python scripts/replay_scenario.py --latest-policy recompute
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from consensus_monitor import (  # noqa: E402
    ManualClock,
    MetricKind,
    MonitorConfig,
    ObservationError,
    ObservationStore,
    ObserverClient,
)


def _dump(value: Any) -> Any:
    if value is None or isinstance(value, (int, str)):
        return value
    return value.model_dump(mode="json", by_alias=True)


def _step(name: str, action: Callable[[], Any]) -> dict[str, Any]:
    try:
        result = action()
    except ObservationError as exc:
        return {"step": name, "ok": False, "code": exc.code, "error": str(exc)}
    return {"step": name, "ok": True, "result": _dump(result)}


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay an observation lifecycle.")
    parser.add_argument("--caller", default="ST1SJ3DTE5DN7X54YDH5D64R3BCB6A2AG2ZQ8YPD5")
    parser.add_argument("--recipient", default="ST2JHG361ZXG51QTKY2NQCVBPPRRE2KZB1HR05NNC")
    parser.add_argument("--now", type=int, default=1000, help="Trusted clock reading")
    parser.add_argument("--latest-policy", choices=["overwrite", "recompute"], default=None)
    parser.add_argument("--count-policy", choices=["per_call", "per_key"], default=None)
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.latest_policy is not None:
        overrides["latest_policy"] = args.latest_policy
    if args.count_policy is not None:
        overrides["count_policy"] = args.count_policy
    config = MonitorConfig.from_env(**overrides)

    client = ObserverClient(ObservationStore(config, clock=ManualClock(args.now)), args.caller)
    owner = client.caller
    kind = MetricKind.CONSENSUS_LATENCY

    steps: list[tuple[str, Callable[[], Any]]] = [
        ("record", lambda: client.record(kind, 1200, 100)),
        ("get", lambda: client.get(owner, 100, kind)),
        ("get_count", lambda: client.get_count(owner, kind)),
        ("record_future", lambda: client.record(kind, 1200, args.now + 1)),
        ("amend", lambda: client.amend(100, kind, 1600, "fixed")),
        ("get", lambda: client.get(owner, 100, kind)),
        ("share", lambda: client.share(args.recipient, kind, 100)),
        ("get_count", lambda: client.get_count(owner, kind)),
        ("delete", lambda: client.delete(100, kind)),
        ("get_count", lambda: client.get_count(owner, kind)),
        ("get_latest", lambda: client.get_latest(owner, kind)),
        ("delete_again", lambda: client.delete(100, kind)),
    ]
    for name, action in steps:
        print(json.dumps(_step(name, action)))


if __name__ == "__main__":
    main()
