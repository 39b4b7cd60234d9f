"""
Offline consistency check for an object store directory.

Reports orphan payloads, orphan sidecars, corrupt sidecars and foreign
entries without starting the service.

Usage:
    bytestore-fsck ./data/containers
    CONFIG_PATH=config.yaml bytestore-fsck
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from bytestore.config import ConfigurationError, get_settings
from bytestore.services.consistency import ConsistencyReport, scan_store

console = Console()

EXIT_CONSISTENT = 0
EXIT_INCONSISTENT = 1
EXIT_ERROR = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Check an object store directory for disk-level inconsistencies",
    )
    parser.add_argument(
        "root",
        nargs="?",
        type=Path,
        help="Object store root (default: storage.path from the service config)",
    )
    return parser.parse_args(argv)


def print_report(report: ConsistencyReport) -> None:
    """Render a scan report to the console."""
    summary = Table(title=f"Object store {report.root}")
    summary.add_column("Check")
    summary.add_column("Count", justify="right")
    summary.add_row("Containers", str(report.container_count))
    summary.add_row("Objects", str(report.object_count))
    summary.add_row("Orphan payloads", str(len(report.orphan_payloads)))
    summary.add_row("Orphan sidecars", str(len(report.orphan_sidecars)))
    summary.add_row("Corrupt sidecars", str(len(report.corrupt_sidecars)))
    summary.add_row("Ignored entries", str(len(report.invalid_entries)))
    console.print(summary)

    for path in report.orphan_payloads:
        console.print(f"  [red]ORPHAN PAYLOAD[/red]  {path}")
    for path in report.orphan_sidecars:
        console.print(f"  [red]ORPHAN SIDECAR[/red]  {path}")
    for corrupt in report.corrupt_sidecars:
        console.print(f"  [red]CORRUPT[/red]  {corrupt.path}: {corrupt.reason}")
    for path in report.invalid_entries:
        console.print(f"  [yellow]IGNORED[/yellow]  {path}")

    if report.is_consistent:
        console.print("[green]Store is consistent[/green]")
    else:
        console.print(f"[red]{report.problem_count} problem(s) found[/red]")


def main(argv: list[str] | None = None) -> int:
    """Run the consistency check and return the process exit code."""
    args = parse_args(argv)

    root: Path | None = args.root
    if root is None:
        try:
            root = Path(get_settings().storage.path)
        except ConfigurationError as e:
            console.print(f"[red]FATAL: Configuration error[/red]\n{e}")
            return EXIT_ERROR

    try:
        report = scan_store(root)
    except OSError as e:
        console.print(f"[red]FATAL: Cannot scan {root}[/red]\n{e}")
        return EXIT_ERROR

    print_report(report)
    return EXIT_CONSISTENT if report.is_consistent else EXIT_INCONSISTENT


if __name__ == "__main__":
    sys.exit(main())
