"""CLI entry point for gitprojects."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional

from gitprojects import __version__
from gitprojects.catalog import SORT_CHOICES
from gitprojects.errors import ConfigurationError
from gitprojects.logging import setup_logging
from gitprojects.models import DEFAULT_MAX_DEPTH, ScanConfig, ScanFilter, ScanResult
from gitprojects.scanner import scan


def _filter_label(scan_filter: ScanFilter) -> Optional[str]:
    """Build a filter description string, or None if no filters."""
    parts = []
    if scan_filter.platform:
        parts.append(f"platform: {scan_filter.platform}")
    if scan_filter.account:
        parts.append(f"account: {scan_filter.account}")
    return " | ".join(parts) if parts else None


def print_problems(result: ScanResult) -> None:
    """Report per-root failures and per-directory warnings on stderr."""
    from rich.console import Console

    from gitprojects.theme import MUTED, RED, YELLOW

    err = Console(stderr=True)
    for failure in result.failures:
        err.print(f"[{RED}]✗[/{RED}] {failure}")
    for warning in result.warnings:
        if warning.kind == "invalid-root":
            continue  # already listed as a failure
        err.print(f"[{YELLOW}]![/{YELLOW}] [{MUTED}]{warning.kind}[/{MUTED}] {warning.path}: {warning.message}")


def print_table(result: ScanResult, scan_filter: ScanFilter) -> None:
    """Print the scan result as a Rich table on stdout."""
    from rich.console import Console
    from rich.table import Table
    from rich.text import Text

    from gitprojects.theme import (
        CYAN,
        GREEN,
        ICON_INVALID,
        ICON_REPOS,
        MUTED,
        RED,
        SURFACE,
        flag,
        identity_text,
        platform_text,
    )

    console = Console()

    flabel = _filter_label(scan_filter)
    if flabel:
        console.print(f"  [dim]Filtered:[/dim] [{CYAN}]{flabel}[/{CYAN}]\n")

    if not result.records:
        console.print(f"[{RED}]No git repositories found.[/{RED}] Try: gitprojects ~/code")
        return

    table = Table(border_style=SURFACE, show_edge=True, pad_edge=True)
    table.add_column("Name", style=f"bold {CYAN}")
    table.add_column("Path", style=MUTED, overflow="fold")
    table.add_column("Remote")
    table.add_column("Identity")
    table.add_column("Submodules", justify="center")

    for r in result.records:
        name = Text(r.name)
        if not r.is_valid_git_repo:
            name.append(f" {ICON_INVALID}", style=RED)
        table.add_row(
            name,
            r.local_path,
            platform_text(r),
            identity_text(r.effective_config),
            flag(r.contains_submodules),
        )

    console.print(table)
    console.print(f"  {ICON_REPOS} [bold {GREEN}]{len(result.records)}[/bold {GREEN}] repositories")


def print_json(result: ScanResult) -> None:
    """Dump the scan result as JSON to stdout."""
    print(json.dumps(result.to_dict(), indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitprojects",
        description="Find git repositories and catalogue their remotes, accounts and identities.",
    )
    parser.add_argument(
        "roots",
        nargs="*",
        default=["."],
        metavar="ROOT",
        help="Directories to scan (default: current directory)",
    )
    depth = parser.add_mutually_exclusive_group()
    depth.add_argument(
        "-d", "--depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        metavar="N",
        help=f"Maximum recursion depth below each root (default: {DEFAULT_MAX_DEPTH})",
    )
    depth.add_argument(
        "--unlimited",
        action="store_true",
        help="No depth limit",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Descend into symlinked directories",
    )
    parser.add_argument(
        "--no-submodules",
        action="store_true",
        help="Leave out repositories whose .git is a gitdir file",
    )
    parser.add_argument(
        "--account",
        metavar="NAME",
        help="Only show repositories of this account (exact match)",
    )
    parser.add_argument(
        "--platform",
        metavar="HOST",
        help="Only show repositories hosted on HOST (e.g. github.com)",
    )
    parser.add_argument(
        "-s", "--sort",
        choices=SORT_CHOICES,
        default="name",
        help="Sort profile (default: name)",
    )
    parser.add_argument(
        "-r", "--reverse",
        action="store_true",
        help="Reverse the sort order",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )
    parser.add_argument(
        "-l", "--locale",
        metavar="LOCALE",
        help="Locale tag passed through to the output (e.g. en, de)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gitprojects {__version__}",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the gitprojects CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: None, 1: "INFO"}.get(args.verbose, "DEBUG")
    setup_logging(level=level)

    try:
        config = ScanConfig(
            root_paths=tuple(args.roots),
            max_depth=None if args.unlimited else args.depth,
            follow_symlinks=args.follow_symlinks,
            include_submodules=not args.no_submodules,
            locale=args.locale,
        )
    except ConfigurationError as exc:
        parser.error(str(exc))

    scan_filter = ScanFilter(account=args.account, platform=args.platform)
    result = scan(config, scan_filter, args.sort, reverse=args.reverse)

    if args.json_output:
        print_json(result)
    else:
        print_table(result, scan_filter)
    print_problems(result)

    if result.failures and len(result.failures) == len(config.root_paths):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
