"""CLI entry point.

Examples:
    branch-pr                        Create a PR for the current branch
    branch-pr --draft                Create it as a draft
    branch-pr --dry-run              Print the derived PR and pass --dry-run to gh
    branch-pr --show                 Print the derived PR without calling gh
    branch-pr --base main            Target main regardless of branch rules
    branch-pr --init                 Write a starter .branch-pr.toml and template
    branch-pr -- --reviewer alice    Pass extra arguments to gh pr create
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path

from branch_pr import gh, git
from branch_pr.config import REPO_CONFIG_NAME, write_starter_files
from branch_pr.errors import BranchPrError
from branch_pr.pipeline import RunOptions, prepare_pull_request
from branch_pr.version import get_version_info


def configure_logging(verbosity: int) -> None:
    """WARNING by default, INFO with -v, DEBUG with -vv."""
    from rich.console import Console
    from rich.logging import RichHandler

    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branch-pr",
        description="Create a pull request for the current branch with gh.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Unrecognized arguments are passed through to 'gh pr create'.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help=f"config file (default: $BRANCH_PR_CONFIG, ./{REPO_CONFIG_NAME}, "
        "then ~/.config/branch-pr/config.toml)",
    )
    parser.add_argument(
        "--base",
        metavar="BRANCH",
        help="target branch (overrides the branch rules)",
    )
    parser.add_argument(
        "--draft",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="create the PR as a draft (default: from config)",
    )
    parser.add_argument(
        "--dry-run",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="print the derived PR and pass --dry-run to gh (default: from config)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="print the derived PR without calling gh",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help=f"write a starter {REPO_CONFIG_NAME} and PR template, then exit",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="with --init, overwrite an existing config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase verbosity (can be specified multiple times)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=get_version_info().format_full(),
    )
    return parser


def print_pull_request(pr: gh.PullRequest) -> None:
    """Print every derived value of the pull request and the gh command."""
    from rich import box
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table
    from rich.text import Text

    console = Console()

    # The body has its own panel
    cmd = gh.build_create_command(pr)
    cmd[cmd.index("--body") + 1] = "…"

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()
    table.add_row("Branch", Text(f"{pr.head} → {pr.base}"))
    table.add_row("Title", Text(pr.title))
    table.add_row("Labels", Text(", ".join(pr.labels) or "-"))
    table.add_row("Draft", Text(str(pr.draft)))
    table.add_row("Dry run", Text(str(pr.dry_run)))
    if pr.extra_args:
        table.add_row("gh args", Text(" ".join(pr.extra_args)))
    table.add_row("Command", Text(shlex.join(cmd)))

    console.print(Panel(table, title="Pull request", box=box.ROUNDED))
    console.print(Panel(Text(pr.body), title="Body", box=box.ROUNDED))


def cmd_init(args: argparse.Namespace) -> int:
    """Write starter config and template into the repository."""
    from rich.console import Console
    from rich.text import Text

    console = Console()
    repo_root = git.get_repo_root()
    config_path = args.config or repo_root / REPO_CONFIG_NAME
    for path in write_starter_files(config_path, repo_root, force=args.force):
        console.print(Text.assemble(("✓ ", "green"), f"Wrote {path}"))
    return 0


def cmd_create(args: argparse.Namespace, extra_args: list[str]) -> int:
    """Derive the pull request and hand it to gh."""
    from rich.console import Console
    from rich.text import Text

    options = RunOptions(
        config_path=args.config,
        base=args.base,
        draft=args.draft,
        dry_run=args.dry_run,
        extra_args=extra_args,
    )
    pr = prepare_pull_request(options)

    if args.show or pr.dry_run:
        print_pull_request(pr)
    if args.show:
        return 0

    output = gh.create_pr(pr)

    console = Console()
    console.print(Text(output))
    console.print(Text.assemble(("Title: ", "bold cyan"), pr.title))
    console.print(Text.assemble(("Target: ", "bold cyan"), pr.base))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args, extra_args = parser.parse_known_args(argv)
    if "--" in extra_args:
        extra_args.remove("--")

    configure_logging(args.verbose)

    try:
        if args.init:
            return cmd_init(args)
        return cmd_create(args, extra_args)
    except KeyboardInterrupt:
        return 130
    except BranchPrError as e:
        from rich.console import Console
        from rich.text import Text

        Console(stderr=True).print(Text.assemble(("Error: ", "bold red"), str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
