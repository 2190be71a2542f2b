"""Command-line interface for content-lock."""

from content_lock.cli.main import main, run_command
from content_lock.cli.parser import build_parser, parse_arguments

__all__ = ["build_parser", "main", "parse_arguments", "run_command"]
