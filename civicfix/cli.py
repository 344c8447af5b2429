"""CLI for CivicFix: schema setup, health checks and record maintenance."""

from __future__ import annotations

import argparse
import asyncio
import sys

from civicfix.bootstrap import open_backends
from civicfix.config import Settings, configure_logging, get_settings
from civicfix.errors import ComplaintError


def _settings(args) -> Settings:
    settings = get_settings()
    if args.backend:
        settings = settings.model_copy(update={"backend": args.backend})
    return settings


async def cmd_init_db(args):
    """Create the complaints table on the configured backend."""
    settings = _settings(args)
    async with open_backends(settings, create_schema=True):
        pass
    print(f"Schema ready on {settings.backend} backend")


async def cmd_health(args):
    settings = _settings(args)
    async with open_backends(settings) as lifecycle:
        await lifecycle.repository.ping()
    print(f"{settings.backend} backend: ok")


async def cmd_list(args):
    async with open_backends(_settings(args)) as lifecycle:
        complaints = await lifecycle.list_all()
    if args.status:
        complaints = [c for c in complaints if c.status.value == args.status]
    for c in complaints:
        assigned = f" -> {c.assigned_to}" if c.assigned_to else ""
        print(f"{c.id}  {c.status.value:<9}  {c.submitted_at:%Y-%m-%d %H:%M}  {c.location}{assigned}")
    print(f"{len(complaints)} complaint(s)")


async def cmd_delete(args):
    async with open_backends(_settings(args)) as lifecycle:
        deletion = await lifecycle.delete(args.id)
    print(f"Deleted {deletion.complaint.id}")
    for url in deletion.failed:
        print(f"  WARNING: attachment not released: {url}")


def main():
    parser = argparse.ArgumentParser(description="CivicFix CLI")
    parser.add_argument("--backend", choices=["server", "edge"], default=None,
                        help="Override the configured backend")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create the complaints schema")
    subparsers.add_parser("health", help="Check the record store is reachable")

    ls = subparsers.add_parser("list", help="List complaints, most recent first")
    ls.add_argument("--status", choices=["pending", "assigned", "completed"], default=None)

    rm = subparsers.add_parser("delete", help="Delete a complaint and release its images")
    rm.add_argument("id", help="Complaint id")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(get_settings().log_level)
    commands = {
        "init-db": cmd_init_db,
        "health": cmd_health,
        "list": cmd_list,
        "delete": cmd_delete,
    }
    try:
        asyncio.run(commands[args.command](args))
    except ComplaintError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
