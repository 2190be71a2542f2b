"""CLI argument parsing."""

from __future__ import annotations

import argparse

from content_lock.core.config import BreakPolicy
from content_lock.core.constants import LOCK_FILE_FORMATS, VALID_LOG_LEVELS

# Attempt to load argcomplete for shell tab-completion (optional dependency)
_ARGCOMPLETE_AVAILABLE = False
try:
    import argcomplete

    _ARGCOMPLETE_AVAILABLE = True
except ImportError:
    pass  # argcomplete not installed

COMMANDS: dict[str, str] = {
    "status": "Show whether a content item is locked for the acting user",
    "lock": "Lock a content item for the acting user (refreshes an own lock)",
    "remove": "Remove the acting user's own lock",
    "unlock": "Break another user's lock and leave them an unlock notice",
    "resolve": "Acknowledge that the acting user's lock was broken",
    "show": "Print every lock and unlock notice of the directory",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-lock",
        description="content-lock - Inspect and change edit locks of content items",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Is blog/hello locked for alice?
  content-lock --dir content/blog --user alice status blog/hello

  # Take the lock
  content-lock --dir content/blog --user alice lock blog/hello

  # Bob breaks alice's stale lock
  content-lock --dir content/blog --user bob --users users.yml unlock blog/hello

  # Alice acknowledges the broken lock
  content-lock --dir content/blog --user alice resolve blog/hello

  # Dump the whole lock file
  content-lock --dir content/blog show

Exit codes:
  0  success
  1  lock file could not be written, or changed concurrently
  2  permission denied or no acting user
  3  invalid configuration
""",
    )

    parser.add_argument("command", choices=sorted(COMMANDS), help="Operation to run")
    parser.add_argument("item", nargs="?", help="Content item id, e.g. blog/hello (not used by 'show')")

    target_group = parser.add_argument_group("Target", "Where locks live and who is acting")
    target_group.add_argument("--dir", dest="directory", default=".", help="Content directory holding the lock file")
    target_group.add_argument("--user", help="Id of the acting user")
    target_group.add_argument(
        "--users",
        metavar="FILE",
        help="YAML/JSON file mapping user ids to emails (default: every id is a known user)",
    )

    lock_group = parser.add_argument_group("Locking", "Overrides for CONTENT_LOCK_* settings")
    lock_group.add_argument("--duration", type=int, help="Seconds before a lock may be broken (default: 120)")
    lock_group.add_argument("--lock-file", help="Lock file name (default: .lock)")
    lock_group.add_argument("--format", choices=LOCK_FILE_FORMATS, help="Lock file format (default: yaml)")
    lock_group.add_argument(
        "--break-policy",
        choices=[policy.value for policy in BreakPolicy],
        help="Whether owners may break their own lock (default: permissive)",
    )
    lock_group.add_argument(
        "--no-conflict-check",
        dest="detect_conflicts",
        action="store_const",
        const=False,
        default=None,
        help="Overwrite the lock file even if it changed since it was read",
    )

    log_group = parser.add_argument_group("Logging")
    log_group.add_argument("--log-level", choices=VALID_LOG_LEVELS, help="Log level (default: $LOG_LEVEL or INFO)")
    log_group.add_argument("--log-format", choices=("text", "json"), default="text", help="Log output format")
    log_group.add_argument("--log-file", help="Also write logs to this file")

    # Enable shell tab-completion if argcomplete is installed
    if _ARGCOMPLETE_AVAILABLE:
        argcomplete.autocomplete(parser)

    return parser


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments"""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command != "show" and not args.item:
        parser.error(f"'{args.command}' needs a content item id")
    return args
