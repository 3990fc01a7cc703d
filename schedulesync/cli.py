"""
CLI (Command Line Interface).

This module provides terminal commands against the remote schedule API, e.g.:

    schedulesync list
    schedulesync events
    schedulesync show <id>
    schedulesync add <day> <start> <end>
    schedulesync update <id> [--day D] [--start HH:MM] [--end HH:MM]
    schedulesync remove <id>
    schedulesync export <file.ics>

Global options --base-url and --timeout override SCHEDULESYNC_API_URL and
SCHEDULESYNC_TIMEOUT.
"""

from __future__ import annotations

import argparse
import json
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from schedulesync.config import ClientConfig
from schedulesync.errors import ScheduleServiceError
from schedulesync.export_ics import export_schedules_to_ics
from schedulesync.logger import setup_logging
from schedulesync.model import CreateScheduleDto, Schedule, UpdateScheduleDto
from schedulesync.service import ScheduleService
from schedulesync.store import ScheduleStore


def _schedule_line(s: Schedule) -> str:
    return f"{s.id} | {s.day} {s.start_time}-{s.end_time}"


def _cmd_list(args: argparse.Namespace, store: ScheduleStore) -> int:
    """
    Fetch all schedules and print them as a table.
    """
    store.fetch_all()
    if not store.has_schedules:
        print("No schedules.")
        return 0

    table = Table(title=f"Schedules ({len(store.schedules)})", box=box.SIMPLE_HEAVY)
    table.add_column("ID", justify="right", no_wrap=True)
    table.add_column("Day", no_wrap=True)
    table.add_column("Start", no_wrap=True)
    table.add_column("End", no_wrap=True)
    for s in store.schedules:
        table.add_row(str(s.id), s.day, s.start_time, s.end_time)

    Console().print(table)
    return 0


def _cmd_events(args: argparse.Namespace, store: ScheduleStore) -> int:
    """
    Fetch all schedules and print their calendar events as JSON.
    """
    events = store.fetch_all()
    print(json.dumps([e.to_dict() for e in events], indent=2, ensure_ascii=False))
    return 0


def _cmd_show(args: argparse.Namespace, store: ScheduleStore) -> int:
    schedule = store.service.get_schedule(args.id)
    print(_schedule_line(schedule))
    return 0


def _cmd_add(args: argparse.Namespace, store: ScheduleStore) -> int:
    dto = CreateScheduleDto(day=args.day.strip(), start_time=args.start.strip(), end_time=args.end.strip())
    if not (dto.day and dto.start_time and dto.end_time):
        print("Please provide day, start and end.")
        return 1

    created = store.create(dto)
    print(f"Created: {_schedule_line(created)}")
    return 0


def _cmd_update(args: argparse.Namespace, store: ScheduleStore) -> int:
    dto = UpdateScheduleDto(day=args.day, start_time=args.start, end_time=args.end)
    if not dto.to_dict():
        print("Please provide at least one of --day, --start, --end.")
        return 1

    updated = store.update(args.id, dto)
    print(f"Updated: {_schedule_line(updated)}")
    return 0


def _cmd_remove(args: argparse.Namespace, store: ScheduleStore) -> int:
    store.delete(args.id)
    print(f"Removed: {args.id}")
    return 0


def _cmd_export(args: argparse.Namespace, store: ScheduleStore) -> int:
    """
    Export all remote schedules into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    store.fetch_all()
    if not store.has_schedules:
        print("No schedules to export.")
        return 0

    n = export_schedules_to_ics(store.schedules, out_path)
    print(f"Exported {n} schedules to: {out_path}")
    return 0


COMMANDS = {
    "list": _cmd_list,
    "events": _cmd_events,
    "show": _cmd_show,
    "add": _cmd_add,
    "update": _cmd_update,
    "remove": _cmd_remove,
    "export": _cmd_export,
}


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="schedulesync", description="Schedule sync CLI")
    parser.add_argument("--base-url", type=str, default=None, help="API base URL (e.g. http://localhost:8000/api)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests and decoding details")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all schedules")
    sub.add_parser("events", help="Print calendar events as JSON")

    p_show = sub.add_parser("show", help="Show one schedule")
    p_show.add_argument("id", type=int, help="Schedule ID")

    p_add = sub.add_parser("add", help="Create a schedule")
    p_add.add_argument("day", type=str, help="Day (YYYY-MM-DD)")
    p_add.add_argument("start", type=str, help="Start time (HH:MM)")
    p_add.add_argument("end", type=str, help="End time (HH:MM)")

    p_update = sub.add_parser("update", help="Update fields of a schedule")
    p_update.add_argument("id", type=int, help="Schedule ID")
    p_update.add_argument("--day", type=str, default=None, help="New day (YYYY-MM-DD)")
    p_update.add_argument("--start", type=str, default=None, help="New start time (HH:MM)")
    p_update.add_argument("--end", type=str, default=None, help="New end time (HH:MM)")

    p_remove = sub.add_parser("remove", help="Delete a schedule")
    p_remove.add_argument("id", type=int, help="Schedule ID")

    p_export = sub.add_parser("export", help="Export schedules to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. out.ics)")

    return parser


def build_store(args: argparse.Namespace) -> ScheduleStore:
    """
    Create a store backed by a service configured from env + CLI flags.
    """
    config = ClientConfig.from_env()
    if args.base_url:
        config.base_url = args.base_url
    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    return ScheduleStore(ScheduleService(config))


def main(argv: list[str] | None = None, store: Optional[ScheduleStore] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if store is None:
        try:
            store = build_store(args)
        except ValueError as exc:
            parser.error(str(exc))

    try:
        code = COMMANDS[args.command](args, store)
    except ScheduleServiceError as exc:
        print(f"Error: {exc}")
        code = 1

    raise SystemExit(code)
