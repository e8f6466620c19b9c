"""Simple CLI entry point to post a prebuilt card to a Teams webhook."""

from __future__ import annotations

import argparse
import json
import os
import sys
from functools import partial
from typing import Any, List, Optional, TextIO

from notify.errors import NotificationError
from notify.teams import IncomingWebhook, TeamsNotifier

WEBHOOK_ENV = "TEAMS_WEBHOOK_URL"
PAYLOAD_ENV = "TEAMS_PAYLOAD_FILE"
TIMEOUT_ENV = "TEAMS_WEBHOOK_TIMEOUT"
STDIN_MARKER = "-"


def load_payload(source: str, stdin: Optional[TextIO] = None) -> Any:
    """Read the JSON payload from a file path, or from stdin when source is '-'."""
    try:
        if source == STDIN_MARKER:
            return json.load(stdin or sys.stdin)
        with open(source, encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise ValueError(f"Cannot read payload from {source}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValueError(f"Payload in {source} is not valid JSON: {exc}") from exc


def parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ValueError(f"--timeout/{TIMEOUT_ENV} must be a number of seconds.") from exc
    if timeout <= 0:
        raise ValueError(f"--timeout/{TIMEOUT_ENV} must be greater than zero.")
    return timeout


def build_parser() -> argparse.ArgumentParser:
    """Describe the command-line options available to the user."""
    parser = argparse.ArgumentParser(description="Send one notification to Microsoft Teams.")
    parser.add_argument(
        "--webhook",
        default=None,
        help=f"Teams incoming webhook URL (defaults to {WEBHOOK_ENV} env var if unset)",
    )
    parser.add_argument(
        "--payload",
        default=None,
        help=(
            "Path to a JSON adaptive card, or '-' for stdin "
            f"(defaults to {PAYLOAD_ENV} env var, then stdin)"
        ),
    )
    parser.add_argument(
        "--timeout",
        default=None,
        help=f"Seconds to wait for the webhook (defaults to {TIMEOUT_ENV} env var; no limit if unset)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the payload without sending")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse CLI arguments and send a single notification."""
    args = build_parser().parse_args(argv)
    webhook = args.webhook or os.environ.get(WEBHOOK_ENV)
    source = args.payload or os.environ.get(PAYLOAD_ENV) or STDIN_MARKER
    timeout = parse_timeout(args.timeout or os.environ.get(TIMEOUT_ENV))
    payload = load_payload(source)

    if args.dry_run:
        print(f"[DRY RUN] Would send to {webhook or '<no webhook configured>'}:")
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    notifier = TeamsNotifier(transport_factory=partial(IncomingWebhook, timeout=timeout))
    try:
        notifier.notify(webhook, payload)
    except NotificationError as exc:
        # The caller (usually a CI job) decides what a failed notification means.
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    print("[INFO] Notification sent to Microsoft Teams.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
