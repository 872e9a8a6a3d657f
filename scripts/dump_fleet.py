#!/usr/bin/env python3
"""Dump the current fleet temperature state.

This script fetches devices and positions once, joins them and prints
each vehicle with its alarm tier and target-band status.  With
``--device`` it also prints the summary and alarm events of that
vehicle's trailing window.

Usage
-----
Set environment variables and run::

    export REEFER_BASE_URL="http://gps.example.com"
    export REEFER_TOKEN="your-token"
    python scripts/dump_fleet.py

Options::

    --page-url URL   Take base URL and token from a dashboard page URL
    --device ID      Also summarise this device's history
    --hours N        History window in hours (default: config value)
    --json           Output as machine-readable JSON
    -v               Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyreefer import (  # noqa: E402
    FleetItem,
    ReeferClient,
    ReeferConfig,
    ReeferError,
    classify,
    detect_alarm_events,
    range_status,
    summarize,
)


def _fleet_row(item: FleetItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "label": item.label,
        "last_seen": item.last_seen.isoformat() if item.last_seen else None,
        "temp_c": item.temp_c,
        "tier": classify(item.temp_c).value if item.temp_c is not None else None,
        "range": range_status(item.temp_c).value if item.temp_c is not None else None,
        "door": "open" if item.door else "closed",
        "setpoint": item.setpoint,
    }


def _print_table(rows: list[dict[str, Any]]) -> None:
    header = f"{'ID':>6}  {'Label':<16} {'Temp °C':>8}  {'Tier':<6} {'Range':<16} {'Door':<7} {'Setpoint':>8}"
    print(header)
    print("-" * len(header))
    for row in rows:
        temp = f"{row['temp_c']:.1f}" if row["temp_c"] is not None else "--"
        print(
            f"{row['id']:>6}  {row['label']:<16} {temp:>8}  {row['tier'] or '--':<6} "
            f"{row['range'] or '--':<16} {row['door']:<7} {row['setpoint']:>8.1f}"
        )


async def _run(args: argparse.Namespace) -> int:
    config = ReeferConfig.from_page_url(args.page_url) if args.page_url else ReeferConfig.from_env()
    output: dict[str, Any] = {}

    async with ReeferClient(config) as client:
        fleet = await client.get_fleet()
        output["fleet"] = [_fleet_row(item) for item in fleet]

        if args.device is not None:
            samples = await client.get_history_samples(args.device, hours=args.hours)
            summary = summarize(samples)
            events = detect_alarm_events(args.device, samples)
            output["summary"] = summary.model_dump()
            output["events"] = [event.model_dump(mode="json") for event in events]

    if args.json:
        print(json.dumps(output, indent=2, default=str))
        return 0

    _print_table(output["fleet"])
    if "summary" in output:
        summary_dict = output["summary"]
        print(f"\nDevice {args.device}: {summary_dict['count']} samples")
        print(f"  min: {summary_dict['min']}  max: {summary_dict['max']}  in range: {summary_dict['pct_in_range']}%")
        for event in output["events"]:
            print(f"  {event['ts']}  {event['tier']:<6} {event['temp_c']:.1f} °C  {event['description']}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump fleet temperature state")
    parser.add_argument("--page-url", help="Dashboard page URL carrying the token query parameter")
    parser.add_argument("--device", type=int, help="Device id to summarise")
    parser.add_argument("--hours", type=float, default=None, help="History window in hours")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(_run(args))
    except ReeferError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
