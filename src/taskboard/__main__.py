"""CLI entry point for taskboard."""

import argparse
import logging
from pathlib import Path

from .cli import commands
from .cli.commands import RANK_CHOICES
from .cli.output import error
from .config import Settings
from .errors import TaskboardError
from .logging import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="taskboard",
        description="Manage Kanban task lists stored in DynamoDB",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--env",
        dest="env_name",
        default=None,
        help="Environment name used as table suffix (default: dev)",
    )
    parser.add_argument(
        "--endpoint-url",
        default=None,
        help="Custom DynamoDB endpoint, e.g. http://localhost:8000",
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        type=Path,
        default=None,
        help="YAML file with board column configuration",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("lists", help="List all task lists")
    p.set_defaults(func=commands.run_lists)

    p = sub.add_parser("create-list", help="Create a task list")
    p.add_argument("name")
    p.add_argument("--color", default="blue")
    p.add_argument("--id", dest="list_id", default=None)
    p.set_defaults(func=commands.run_create_list)

    p = sub.add_parser("show", help="Show the tasks of a list")
    p.add_argument("list_id")
    p.set_defaults(func=commands.run_show)

    p = sub.add_parser("add", help="Add a task at the top of a column")
    p.add_argument("list_id")
    p.add_argument("column")
    p.add_argument("title")
    p.add_argument("--details", default="")
    p.add_argument("--label", action="append", default=None, help="Label ID (repeatable)")
    p.set_defaults(func=commands.run_add)

    p = sub.add_parser("edit", help="Edit title, details or labels of a task")
    p.add_argument("task_id")
    p.add_argument("--title", default=None)
    p.add_argument("--details", default=None)
    p.add_argument("--label", action="append", default=None, help="Label ID (repeatable)")
    p.set_defaults(func=commands.run_edit)

    p = sub.add_parser("delete", help="Delete a task")
    p.add_argument("list_id")
    p.add_argument("task_id")
    p.set_defaults(func=commands.run_delete)

    p = sub.add_parser("move", help="Move a task to the top of another column")
    p.add_argument("list_id")
    p.add_argument("task_id")
    p.add_argument("column")
    p.set_defaults(func=commands.run_move)

    p = sub.add_parser("swap", help="Swap two tasks of the same column")
    p.add_argument("task_id")
    p.add_argument("other_task_id")
    p.set_defaults(func=commands.run_swap)

    p = sub.add_parser("rank", help="Move a task within its column")
    p.add_argument("task_id")
    p.add_argument("target", choices=sorted(RANK_CHOICES))
    p.set_defaults(func=commands.run_rank)

    p = sub.add_parser("check", help="Check that task positions of a list are dense")
    p.add_argument("list_id")
    p.add_argument("--repair", action="store_true", help="Renumber broken columns")
    p.set_defaults(func=commands.run_check)

    p = sub.add_parser("labels", help="List labels with usage counts")
    p.add_argument("--language", default="en")
    p.set_defaults(func=commands.run_labels)

    p = sub.add_parser("delete-label", help="Delete a label no task uses")
    p.add_argument("label_id")
    p.set_defaults(func=commands.run_delete_label)

    return parser


def main(argv: list[str] | None = None, app=None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments (sys.argv if None)
        app: Prebuilt TaskboardApp, used instead of one built from settings
    """
    args = build_parser().parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    for name in ("env_name", "endpoint_url", "config_file", "log_file"):
        value = getattr(args, name)
        if value is not None:
            settings_kwargs[name] = value
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose

    settings = Settings(**settings_kwargs)
    setup_logging(settings.verbose, settings.log_file)

    if app is None:
        from .app import build_app

        app = build_app(settings)

    try:
        return args.func(app, args)
    except TaskboardError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
