"""Command line interface for backup and restore.

Usage:
    gudang-backup export
    gudang-backup validate gudang-backup_20260101-120000.json
    gudang-backup restore gudang-backup_20260101-120000.json
    gudang-backup restore gudang-backup_20260101-120000.json --yes
    gudang-backup share file:///home/me/Backups/gudang-backup_20260101-120000.json
    gudang-backup forget-directory
    gudang-backup --config ./gudang.toml -v export

Commands:
    export            - Snapshot every table into a JSON backup file
    restore           - Replace all data with the contents of a backup file
    validate          - Check a backup file without touching the database
    share             - Print a directly shareable URI for a stored file
    forget-directory  - Forget the remembered export folder
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from urllib.parse import unquote

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm
from rich.table import Table

from gudang_backup.backup.models import BackupResult, RestoreSummary, ValidationReport
from gudang_backup.backup.validation import validate_snapshot
from gudang_backup.config.loader import load_config
from gudang_backup.config.models import AppConfig
from gudang_backup.errors import BackupError
from gudang_backup.factory import App, build_app, build_preference
from gudang_backup.storage.console import ConsoleDirectoryStorage
from gudang_backup.storage.models import StorageLocation

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    """Route library logging through rich; ``-v`` INFO, ``-vv`` DEBUG."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load(args: argparse.Namespace) -> AppConfig:
    return load_config(Path(args.config) if args.config else None)


def _build(args: argparse.Namespace) -> App:
    return build_app(_load(args), scoped_storage=ConsoleDirectoryStorage(console))


# ============================================================================
# Output helpers
# ============================================================================


def _version_label(version: int | None) -> str:
    return str(version) if version is not None else "unknown"


def _print_counts(title: str, counts: dict[str, int]) -> None:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Table", style="dim")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


def _print_backup_result(result: BackupResult) -> None:
    if result.notice:
        console.print(f"[yellow]![/yellow] {result.notice}")
    if result.location is StorageLocation.UNKNOWN:
        console.print(f"[bold red]x[/bold red] Backup could not be saved: {result.display_path or result.uri}")
        return
    where = result.display_path or result.uri
    console.print(f"[bold green]v[/bold green] Backup created: [cyan]{result.file_name}[/cyan]")
    console.print(f"  Saved to {where}")
    _print_counts("Rows exported", result.row_counts)


def _print_restore_summary(summary: RestoreSummary) -> None:
    console.print(
        f"[bold green]v[/bold green] Restore complete "
        f"({summary.total_rows} rows, backup version {_version_label(summary.version)})"
    )
    _print_counts("Rows restored", summary.inserted)


def _print_validation(path: str, report: ValidationReport) -> None:
    console.print(f"Validating: [cyan]{path}[/cyan]")
    if report.errors:
        console.print(f"\n[bold red]x[/bold red] Found {len(report.errors)} errors:")
        for error in report.errors:
            console.print(f"   - {error}")
    if report.warnings:
        console.print(f"\n[yellow]![/yellow] Found {len(report.warnings)} warnings:")
        for warning in report.warnings:
            console.print(f"   - {warning}")
    if report.row_counts:
        console.print()
        _print_counts(f"Backup version {_version_label(report.version)}", report.row_counts)
    if report.valid:
        console.print("\n[bold green]v[/bold green] Backup is valid")
    else:
        console.print("\n[bold red]x[/bold red] Backup is invalid")


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_export(args: argparse.Namespace) -> int:
    app = _build(args)
    try:
        result = await app.service.export()
    except BackupError as e:
        logger.debug("Export failed", exc_info=True)
        console.print(f"[bold red]x[/bold red] {e.user_message}")
        return 1
    finally:
        await app.adapter.close()

    _print_backup_result(result)
    return 0 if result.is_durable else 1


async def _async_restore(args: argparse.Namespace) -> int:
    app = _build(args)
    try:
        summary = await app.service.restore(args.backup_path)
    except BackupError as e:
        logger.debug("Restore failed", exc_info=True)
        console.print(f"[bold red]x[/bold red] {e.user_message}")
        if e.__cause__ is not None:
            console.print(f"  [dim]{e.__cause__}[/dim]")
        return 1
    finally:
        await app.adapter.close()

    _print_restore_summary(summary)
    return 0


def share_file_name(candidate: str) -> str:
    """Last path segment of a stored-file URI or path, percent-decoded."""
    segment = unquote(candidate).rstrip("/").rsplit("/", 1)[-1]
    return segment.rsplit(":", 1)[-1]


async def _async_share(args: argparse.Namespace) -> int:
    app = _build(args)
    try:
        file_name = args.name or share_file_name(args.candidates[0])
        uri = await app.share_resolver.resolve(file_name, *args.candidates)
    finally:
        await app.adapter.close()

    if uri is None:
        console.print("[yellow]Sharing is not available for this file.[/yellow]")
        return 1
    console.print(uri)
    return 0


# ============================================================================
# Command handlers
# ============================================================================


def cmd_export(args: argparse.Namespace) -> int:
    """Create a full backup."""
    return asyncio.run(_async_export(args))


def cmd_restore(args: argparse.Namespace) -> int:
    """Replace all data from a backup file, after confirmation."""
    if not args.yes:
        console.print(f"This will replace [bold]all[/bold] data with: {args.backup_path}")
        console.print("  Make sure you have a recent backup before continuing.")
        if not Confirm.ask("Continue?", default=False, console=console):
            console.print("Cancelled.")
            return 0
    return asyncio.run(_async_restore(args))


def cmd_validate(args: argparse.Namespace) -> int:
    """Check a backup file offline."""
    report = validate_snapshot(args.backup_path)
    _print_validation(args.backup_path, report)
    return 0 if report.valid else 1


def cmd_share(args: argparse.Namespace) -> int:
    """Print a shareable URI for a stored file."""
    return asyncio.run(_async_share(args))


def cmd_forget_directory(args: argparse.Namespace) -> int:
    """Clear the remembered export folder so the next export asks again."""
    preference = build_preference(_load(args))
    if preference is None:
        console.print("[yellow]No preference file is configured.[/yellow]")
        return 1
    preference.clear()
    console.print("[bold green]v[/bold green] Export folder forgotten")
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def main() -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="gudang-backup",
        description="Full backup and restore for the Gudang inventory database",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to gudang.toml (default: $GUDANG_CONFIG or ./gudang.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Show log output (-v info, -vv debug)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_export = subparsers.add_parser("export", help="Create a full backup")
    p_export.set_defaults(func=cmd_export)

    p_restore = subparsers.add_parser("restore", help="Restore all data from a backup")
    p_restore.add_argument("backup_path", help="Path to backup JSON file")
    p_restore.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    p_restore.set_defaults(func=cmd_restore)

    p_validate = subparsers.add_parser("validate", help="Validate a backup file")
    p_validate.add_argument("backup_path", help="Path to backup JSON file")
    p_validate.set_defaults(func=cmd_validate)

    p_share = subparsers.add_parser("share", help="Print a shareable URI for a stored file")
    p_share.add_argument("candidates", nargs="+", help="Stored file URIs or paths, in preference order")
    p_share.add_argument("--name", default=None, help="File name for the share copy")
    p_share.set_defaults(func=cmd_share)

    p_forget = subparsers.add_parser("forget-directory", help="Forget the remembered export folder")
    p_forget.set_defaults(func=cmd_forget_directory)

    args = parser.parse_args()
    setup_logging(args.verbose)
    try:
        return args.func(args)
    except BackupError as e:
        console.print(f"[bold red]x[/bold red] {e.user_message}")
        console.print(f"  [dim]{e}[/dim]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
