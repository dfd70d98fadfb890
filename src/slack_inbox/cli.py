"""Command-line entry point for Slack Inbox."""

from __future__ import annotations

import argparse
from pathlib import Path

from slack_inbox.core import (
    AppSettings,
    ServiceContainer,
    build_container,
    configure_logging,
    load_app_settings,
)
from slack_inbox.core.datetime_utils import serialize_datetime
from slack_inbox.inbox import InboxService, ReminderDispatcher


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Slack task inbox")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("info", help="Show the active configuration.")

    sent = subparsers.add_parser("sent", help="List entries a user has sent.")
    sent.add_argument("user_id")

    received = subparsers.add_parser("received", help="List entries a user received.")
    received.add_argument("user_id")

    delete = subparsers.add_parser("delete", help="Delete a sent entry everywhere.")
    delete.add_argument("user_id")
    delete.add_argument("message_ts")

    remind = subparsers.add_parser("remind", help="Send reminders that are due.")
    remind.add_argument(
        "user_ids",
        nargs="*",
        help="Only check these recipients (default: everyone with an inbox).",
    )
    return parser


def execute(
    args: argparse.Namespace, settings: AppSettings, container: ServiceContainer
) -> int:
    """Execute the requested CLI command and return an exit code."""
    command = args.command or "info"
    if command == "info":
        print("Slack inbox is ready.")
        print(f"Store backend: {settings.store.backend}")
        if settings.store.backend == "sqlite":
            print(f"Database path: {settings.store.db_path}")
        print(f"Inbox enabled: {settings.features.inbox_enabled}")
        return 0

    inbox: InboxService = container.resolve("inbox")
    if command == "sent":
        _print_sent(inbox, args.user_id)
    elif command == "received":
        _print_received(inbox, args.user_id)
    elif command == "delete":
        if inbox.delete_entry(args.user_id, args.message_ts):
            print(f"Deleted entry {args.message_ts}.")
        else:
            print(f"No entry {args.message_ts} found for {args.user_id}.")
            return 1
    elif command == "remind":
        dispatcher: ReminderDispatcher = container.resolve("dispatcher")
        report = dispatcher.run(args.user_ids or None)
        print(f"Checked {report.checked} entr(ies), sent {report.sent} reminder(s).")
        if report.rate_limited:
            print("Stopped early: rate-limited by Slack.")
            return 2
    return 0


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    container = build_container(settings)
    try:
        code = execute(args, settings, container)
    finally:
        container.close()
    raise SystemExit(code)


def _print_sent(inbox: InboxService, user_id: str) -> None:
    entries = inbox.load_sent(user_id)
    if not entries:
        print("No sent entries found.")
        return
    print(f"Showing {len(entries)} sent entr(ies):")
    header = f"{'Message TS':<20}  {'Resolved':>8}  {'Deadline':<24}  Description"
    print(header)
    print("-" * len(header))
    for entry in entries:
        resolved = f"{len(entry.resolutions)}/{len(entry.recipient_ids)}"
        deadline = serialize_datetime(entry.deadline) or "-"
        print(f"{entry.message.ts:<20}  {resolved:>8}  {deadline:<24}  {entry.description}")


def _print_received(inbox: InboxService, user_id: str) -> None:
    entries = inbox.load_received(user_id)
    if not entries:
        print("No received entries found.")
        return
    print(f"Showing {len(entries)} received entr(ies):")
    header = f"{'Message TS':<20}  {'From':<12}  {'Next reminder':<24}  Description"
    print(header)
    print("-" * len(header))
    for entry in entries:
        next_reminder = serialize_datetime(entry.reminders[0]) if entry.reminders else "-"
        print(
            f"{entry.message.ts:<20}  {entry.sender_id:<12}  {next_reminder:<24}  {entry.description}"
        )


if __name__ == "__main__":
    main()
