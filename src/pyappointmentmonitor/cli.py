"""Command line entry point.

Examples:
  appointment-monitor ttp --location-ids 5140,5002 --before 2024-05-01T08:25:30
  appointment-monitor ttp --location-ids 5140 --publish-to "Log,Webhook=https://hooks.slack.com/...|msg"
  appointment-monitor ttp --location-ids 5140 --publish-to "Pushover=user_token|device=phone&title=Slots"
  appointment-monitor locations --search seattle

Publisher selections are ``Name`` or ``Name=payload``:
  Log                         message goes to the log
  Webhook=url[|field]         posts {field or "Content": message} to url
  Pushover=user[|k=v&k2=v2]   sends a push notification; needs PUSHOVER_APP_TOKEN
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Sequence
from datetime import datetime

import aiohttp

from .client import Client
from .config import MonitorConfig, Settings, get_settings
from .exceptions import ConfigError, FetchError, ValidationError
from .logs import setup_logging
from .models import Location
from .monitor import Monitor
from .publisher.registry import validate_selections
from .service import resolve_locations
from .util import parse_local_timestamp

_LOGGER = logging.getLogger(__name__)


def _int_list(value: str) -> list[int]:
    try:
        ids = [int(item.strip()) for item in value.split(",") if item.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError("location ids must be integers") from exc
    if not ids:
        raise argparse.ArgumentTypeError("at least one location id is required")
    return ids


def _str_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _timestamp(value: str) -> datetime:
    try:
        return parse_local_timestamp(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="appointment-monitor",
        description="Watch appointment scheduler locations for open slots.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--endpoint", help="Scheduler API endpoint.")
    parser.add_argument("--log-level", dest="log_level", help="Log level (default: INFO).")
    commands = parser.add_subparsers(dest="command", required=True)

    ttp = commands.add_parser("ttp", help="Poll locations and publish available slots.")
    ttp.add_argument(
        "--location-ids",
        dest="location_ids",
        type=_int_list,
        required=True,
        help="Comma separated list of location ids.",
    )
    ttp.add_argument(
        "--poll-period",
        dest="poll_period",
        type=int,
        help="Seconds to wait between polls (10-3600, default: 30).",
    )
    ttp.add_argument(
        "--backoff-period",
        dest="backoff_period",
        type=int,
        help="Seconds to wait after slots were published (>= 60, default: poll period).",
    )
    ttp.add_argument(
        "--before",
        type=_timestamp,
        default=datetime.max,
        help="Only publish slots starting before this ISO local date-time (e.g. 2024-05-01T08:25:30).",
    )
    ttp.add_argument(
        "--publish-to",
        dest="publish_to",
        type=_str_list,
        default=["Log"],
        help="Comma separated list of publisher selections (default: Log).",
    )
    ttp.add_argument(
        "--pushover-token",
        dest="pushover_token",
        help="Pushover application token (default: PUSHOVER_APP_TOKEN).",
    )

    locations = commands.add_parser("locations", help="List known locations.")
    locations.add_argument("--search", help="Case-insensitive filter on name, short name or city.")
    return parser.parse_args(argv)


def _client(settings: Settings, args: argparse.Namespace) -> Client:
    return Client(
        endpoint=args.endpoint or settings.api.endpoint,
        timeout=aiohttp.ClientTimeout(total=settings.api.timeout),
        retry_count=settings.api.retry_count,
        pushover_token=getattr(args, "pushover_token", None) or settings.publisher.pushover_token,
    )


def _monitor_config(settings: Settings, args: argparse.Namespace) -> MonitorConfig:
    poll_period = args.poll_period if args.poll_period is not None else settings.monitor.poll_period
    backoff_period = (
        args.backoff_period if args.backoff_period is not None else settings.monitor.backoff_period
    )
    try:
        return MonitorConfig(poll_period=poll_period, backoff_period=backoff_period)
    except ValueError as exc:
        raise ConfigError(f"Invalid monitor options: {exc}") from exc


def _install_signal_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop.set)
        except (NotImplementedError, RuntimeError):
            _LOGGER.debug("Signal handler for %s is not supported here", signum)


async def _run_monitor(settings: Settings, args: argparse.Namespace) -> int:
    monitor_cfg = _monitor_config(settings, args)
    stop = asyncio.Event()
    _install_signal_handlers(stop)
    async with _client(settings, args) as client:
        service = client.get_service()
        publishers = client.get_publishers()
        for selection in validate_selections(args.publish_to, publishers):
            _LOGGER.warning("Publisher selection %r does not match any publisher", selection)

        known = await service.fetch_locations()
        locations = resolve_locations(args.location_ids, known)
        monitor = Monitor(
            service=service,
            publishers=publishers,
            locations=locations,
            publish_to=tuple(args.publish_to),
            before=args.before,
            poll_period=float(monitor_cfg.poll_period),
            backoff_period=(
                float(monitor_cfg.backoff_period)
                if monitor_cfg.backoff_period is not None
                else None
            ),
        )
        await monitor.run(stop)
    return 0


def _matches(location: Location, search: str | None) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in value.lower() for value in (location.name, location.short_name, location.city))


async def _list_locations(settings: Settings, args: argparse.Namespace) -> int:
    async with _client(settings, args) as client:
        known = await client.get_service().fetch_locations()
    for location in sorted(known, key=lambda item: item.id):
        if not _matches(location, args.search):
            continue
        place = ", ".join(part for part in (location.city, location.state) if part)
        print(f"{location.id}\t{location.simple_name}\t{place}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = get_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    logging_cfg = settings.logging
    if args.log_level:
        logging_cfg = logging_cfg.model_copy(update={"log_level": args.log_level})
    setup_logging(logging_cfg)

    runner = _run_monitor if args.command == "ttp" else _list_locations
    try:
        return asyncio.run(runner(settings, args))
    except (ConfigError, FetchError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if exc.user_message:
            print(exc.user_message, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
