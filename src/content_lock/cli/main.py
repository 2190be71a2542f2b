"""CLI entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from content_lock.cli.parser import parse_arguments
from content_lock.core.config import LockConfig
from content_lock.core.exceptions import (
    ConfigurationError,
    NotAuthenticatedError,
    PermissionDeniedError,
    StoreConflictError,
)
from content_lock.core.logging import setup_logging
from content_lock.locks.manager import LockManager
from content_lock.locks.models import Resource
from content_lock.locks.store import LockFileStore, entries_to_dict
from content_lock.locks.users import OpenUserDirectory, User, UserDirectory, load_user_directory

EXIT_OK = 0
EXIT_WRITE_FAILED = 1
EXIT_DENIED = 2
EXIT_CONFIG = 3


def _print_json(data: dict) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def _load_users(args: argparse.Namespace) -> UserDirectory:
    if args.users:
        return load_user_directory(Path(args.users))
    return OpenUserDirectory()


def _acting_user(args: argparse.Namespace, users: UserDirectory) -> User | None:
    if not args.user:
        return None
    return users.find(args.user) or User(id=args.user)


def run_command(args: argparse.Namespace, logger: logging.Logger) -> int:
    """Run one parsed command and return its exit code."""
    try:
        config = LockConfig.from_args(args, base=LockConfig.from_env())
        directory = Path(args.directory)

        if args.command == "show":
            store = LockFileStore(directory / config.file_name, file_format=config.file_format, logger=logger)
            _print_json(entries_to_dict(store.read()))
            return EXIT_OK

        users = _load_users(args)
        caller = _acting_user(args, users)
        manager = LockManager(Resource(args.item, directory), users=users, config=config, logger=logger)

        if args.command == "status":
            result = manager.get(caller)
            result["unlocked"] = manager.was_broken_for(caller)
            _print_json(result)
            return EXIT_OK

        operations = {
            "lock": manager.acquire,
            "remove": manager.release,
            "unlock": manager.break_lock,
            "resolve": manager.acknowledge,
        }
        success = operations[args.command](caller)
        _print_json({"ok": success, "id": manager.lock_id, **manager.state().to_dict()})
        return EXIT_OK if success else EXIT_WRITE_FAILED

    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG
    except (PermissionDeniedError, NotAuthenticatedError) as e:
        logger.error("%s", e)
        return EXIT_DENIED
    except StoreConflictError as e:
        logger.error("%s. Retry the command.", e)
        return EXIT_WRITE_FAILED


def main(argv: list[str] | None = None) -> None:
    args = parse_arguments(argv)
    logger = setup_logging(log_level=args.log_level, log_format=args.log_format, log_file=args.log_file)
    sys.exit(run_command(args, logger))


if __name__ == "__main__":
    main()
