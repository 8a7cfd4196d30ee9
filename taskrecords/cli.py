"""
taskrecords console tool.

Inspect and clean up tracked task records from the command line.

Usage:
    taskrecords list --group downloads
    taskrecords list --older-than-hours 24
    taskrecords show <task_id>
    taskrecords purge --group downloads --older-than-hours 24
    taskrecords purge --ids <task_id> <task_id>
"""
import argparse
import asyncio
import json
import sys
from datetime import timedelta
from typing import List, Optional

from loguru import logger

from .bootstrap import create_record_store
from .config import ConfigManager
from .database.record_store import RecordStore
from .logging import setup_logging
from .models.record import TaskRecord


def format_record(record: TaskRecord) -> str:
    created = record.task.creation_time.strftime("%Y-%m-%d %H:%M:%S")
    return f"{record.task_id}\t{record.group}\t{record.status.name}\t{record.progress:.2f}\t{created}"


async def list_records(records: RecordStore, group: Optional[str], older_than_hours: Optional[float]) -> int:
    if older_than_hours is not None:
        items = await records.all_records_older_than(timedelta(hours=older_than_hours), group=group)
    else:
        items = await records.all_records(group=group)

    for record in sorted(items, key=lambda r: r.task.creation_time):
        print(format_record(record))
    print(f"{len(items)} record(s)")
    return 0


async def show_record(records: RecordStore, task_id: str) -> int:
    record = await records.record_for_id(task_id)
    if record is None:
        print(f"No record for task {task_id}")
        return 1
    print(json.dumps(record.to_json_map(), indent=2))
    return 0


async def purge_records(records: RecordStore, group: Optional[str], older_than_hours: Optional[float],
                        task_ids: Optional[List[str]]) -> int:
    if task_ids:
        await records.delete_records_with_ids(task_ids)
        print(f"Purged {len(task_ids)} record(s)")
    elif older_than_hours is not None:
        stale = await records.all_records_older_than(timedelta(hours=older_than_hours), group=group)
        await records.delete_records_with_ids(record.task_id for record in stale)
        print(f"Purged {len(stale)} record(s)")
    else:
        await records.delete_all_records(group=group)
        print("Purged all records" + (f" in group {group}" if group else ""))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskrecords", description="Inspect and clean up task records")
    parser.add_argument("--config", default="config.json", help="Path to config.json or .toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    list_parser = subparsers.add_parser("list", help="List records")
    list_parser.add_argument("--group", help="Only records in this group")
    list_parser.add_argument("--older-than-hours", type=float, help="Only records created before this many hours ago")

    show_parser = subparsers.add_parser("show", help="Show one record as JSON")
    show_parser.add_argument("task_id", help="Task id")

    purge_parser = subparsers.add_parser("purge", help="Delete records")
    purge_parser.add_argument("--group", help="Only records in this group")
    purge_parser.add_argument("--older-than-hours", type=float, help="Only records created before this many hours ago")
    purge_parser.add_argument("--ids", nargs="+", metavar="TASK_ID", help="Delete exactly these task ids")

    return parser


async def run(args: argparse.Namespace) -> int:
    config = ConfigManager(args.config)
    general = config.data.general
    setup_logging(debug_mode=args.verbose or general.debug_mode, log_dir=general.log_dir)

    records = create_record_store(config.data)
    try:
        if args.command == "list":
            return await list_records(records, args.group, args.older_than_hours)
        elif args.command == "show":
            return await show_record(records, args.task_id)
        elif args.command == "purge":
            return await purge_records(records, args.group, args.older_than_hours, args.ids)
        return 1
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        print(f"Error: {e}")
        return 1
    finally:
        await records.store.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "purge" and args.ids and (args.group is not None or args.older_than_hours is not None):
        parser.error("purge: --ids cannot be combined with --group or --older-than-hours")

    if not args.command:
        parser.print_help()
        return 1

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
