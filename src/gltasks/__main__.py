"""CLI entry point for gltasks."""

import argparse
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gltasks",
        description="Keep task records in sync with GitLab issues",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Path to directory containing gltasks.yml (default: current directory)",
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
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    poll = commands.add_parser("poll", help="Check linked tasks for remote issue changes")
    poll.add_argument("project_id", help="Local project id")
    poll.add_argument("tasks_file", type=Path, help="YAML file listing the tasks")

    backlog = commands.add_parser("backlog", help="List open issues not linked to a task yet")
    backlog.add_argument("project_id", help="Local project id")
    backlog.add_argument(
        "--existing",
        nargs="*",
        default=[],
        metavar="ISSUE_ID",
        help="Issue numbers already linked to tasks",
    )

    search = commands.add_parser("search", help="Search GitLab issues of a project")
    search.add_argument("project_id", help="Local project id")
    search.add_argument("term", help="Search term")

    link = commands.add_parser("link", help="Print the URL of an issue")
    link.add_argument("project_id", help="Local project id")
    link.add_argument("issue_id", help="Issue number")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.project_root:
        settings_kwargs["project_root"] = args.project_root
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)

    setup_logging(settings.verbose, settings.log_file)

    # Import here to keep --help fast
    if args.command == "poll":
        from .cli.poll import run_poll

        exit_code = run_poll(settings, args.project_id, args.tasks_file)
    elif args.command == "backlog":
        from .cli.backlog import run_backlog

        exit_code = run_backlog(settings, args.project_id, args.existing)
    elif args.command == "search":
        from .cli.lookup import run_search

        exit_code = run_search(settings, args.project_id, args.term)
    else:
        from .cli.lookup import run_link

        exit_code = run_link(settings, args.project_id, args.issue_id)

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
