"""
Command-line interface for datesort.
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress
from rich.table import Table

from .config import Config, SortConfig, load_settings
from .constants import DEFAULT_DATE_FORMAT, DEFAULT_DATE_TYPE, PROGRAM, get_console, get_logger
from .core import Sorter
from .errors import ConfigurationError
from .progress import ProgressContext
from .stats import SortReport

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    last_source = config.get_last_source()
    last_target = config.get_last_target()
    date_format = config.get_date_format() or DEFAULT_DATE_FORMAT
    date_type = config.get_date_type() or DEFAULT_DATE_TYPE

    source_help = "Directory whose files are sorted (not recursive)"
    target_help = "Directory the dated folders are created in"
    if last_source:
        source_help += f" (default: {last_source})"
    if last_target:
        target_help += f" (default: {last_target})"

    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Sort files into folders named after their dates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Downloads ~/Archive
  {PROGRAM} ~/Downloads ~/Archive --date-format "%Y-%m" --preserve-name
  {PROGRAM} ~/Scans ~/Archive --only-type pdf jpg --dry-run
  {PROGRAM} --config settings.yml --yes
        """
    )

    parser.add_argument("source", nargs="?", help=source_help)
    parser.add_argument("target", nargs="?", help=target_help)
    parser.add_argument(
        "--source", "-s", dest="source_override",
        help="Override source directory"
    )
    parser.add_argument(
        "--target", "-t", dest="target_override",
        help="Override target directory"
    )
    parser.add_argument(
        "--config", "-C", type=Path, metavar="FILE",
        help="YAML or JSON settings file; command-line options take precedence"
    )
    parser.add_argument(
        "--date-format", "-f", metavar="FORMAT",
        help=f"strftime pattern for folder and file names (default: {date_format})"
    )
    parser.add_argument(
        "--date-type", "-D", choices=["m", "c"],
        help=f"Sort by modification (m) or creation (c) time (default: {date_type})"
    )
    parser.add_argument(
        "--preserve-name", "-p", action="store_true", default=None,
        help="Keep the original file name after the date"
    )
    parser.add_argument(
        "--no-preserve-name", dest="preserve_name", action="store_false",
        help="Name files after the date only"
    )
    parser.add_argument(
        "--exclude-type", "-x", nargs="+", metavar="EXT",
        help="File extensions to leave alone"
    )
    parser.add_argument(
        "--only-type", "-o", nargs="+", metavar="EXT",
        help="Sort only these file extensions (overrides --exclude-type)"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Preview operations without making changes"
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Auto-confirm processing for saved source/target paths"
    )
    parser.add_argument(
        "--log-file", type=Path, metavar="FILE",
        help="Also write a detailed log to FILE"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def setup_logging(console: Console, verbose: bool, log_file: Optional[Path] = None) -> logging.Logger:
    """Route the package logger to the console and, optionally, a log file."""
    logger = get_logger()
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
        ))
        logger.addHandler(file_handler)

    return logger


def build_settings(args: argparse.Namespace, config: Config) -> Dict[str, Any]:
    """Merge saved defaults, the settings file and command-line options."""
    settings: Dict[str, Any] = config.get_defaults()
    if args.config:
        settings.update(load_settings(args.config))

    overrides = {
        "date_format": args.date_format,
        "date_type": args.date_type,
        "preserve_name": args.preserve_name,
        "exclude_type": args.exclude_type,
        "only_type": args.only_type,
    }
    settings.update({key: value for key, value in overrides.items() if value is not None})

    settings["source"] = args.source_override or args.source or settings.get("source") or \
        config.get_last_source()
    settings["target"] = args.target_override or args.target or settings.get("target") or \
        config.get_last_target()
    return settings


def show_processing_plan(sort_config: SortConfig, dry_run: bool, console: Console) -> None:
    """Display the processing plan before execution."""
    mode = "DRY RUN" if dry_run else "MOVE"
    date_type = "Creation time" if sort_config.date_type.value == "c" else "Modification time"

    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Source:          [blue]{escape(str(sort_config.source))}[/blue]", soft_wrap=True)
    console.print(f"  Target:          [blue]{escape(str(sort_config.target))}[/blue]", soft_wrap=True)
    console.print(f"  Processing Mode: [cyan]{mode}[/cyan]")
    console.print(f"  Date Format:     [cyan]{escape(sort_config.date_format)}[/cyan]")
    console.print(f"  Date Type:       [cyan]{date_type}[/cyan]")
    console.print(f"  Preserve Names:  [cyan]{'Yes' if sort_config.preserve_name else 'No'}[/cyan]")
    if sort_config.only_type:
        console.print(f"  Only Types:      [cyan]{', '.join(sorted(sort_config.only_type))}[/cyan]")
    elif sort_config.exclude_type:
        console.print(f"  Excluded Types:  [cyan]{', '.join(sorted(sort_config.exclude_type))}[/cyan]")
    console.print()


def confirm_processing(console: Console) -> bool:
    """Ask for confirmation when using saved configuration."""
    console.print("[yellow]Confirm processing plan with saved configuration.[/yellow]")

    try:
        response = console.input("Continue? [y/N]: ").strip().lower()
        return response in ['y', 'yes']
    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Operation cancelled[/red]")
        return False


def print_summary(report: SortReport, console: Console) -> None:
    """Print the report counts and any failures."""
    table = Table(title="Sorting Summary")
    table.add_column("Category", style="cyan")
    table.add_column("Count", style="green")

    table.add_row("Eligible", str(report.eligible))
    table.add_row("Skipped by Type", str(report.skipped))
    if report.dry_run:
        table.add_row("Planned Moves", str(report.planned))
    else:
        table.add_row("Moved", str(report.moved))
    table.add_row("Failed", str(report.failed))
    console.print(table)

    if report.failures:
        console.print("\n[red]Failed files:[/red]")
        for failure in report.failures:
            console.print(f"  [red]{failure.kind}[/red] {escape(str(failure.path))}: "
                          f"{escape(failure.message)}", soft_wrap=True, highlight=False)


def print_moves(report: SortReport, console: Console) -> None:
    """List every planned or completed move."""
    for move in report.moves:
        console.print(f"  {escape(str(move.source))} -> {escape(str(move.destination))}",
                      soft_wrap=True, highlight=False)


class _InterruptFlag:
    """Turns Ctrl-C into a flag checked between files."""

    def __init__(self):
        self.requested = False
        self._previous = None

    def _handler(self, signum, frame):
        self.requested = True

    def __enter__(self):
        self._previous = signal.signal(signal.SIGINT, self._handler)
        return self

    def __exit__(self, *exc):
        signal.signal(signal.SIGINT, self._previous)
        return False


def run_sorter(sorter: Sorter, dry_run: bool, console: Console) -> Optional[SortReport]:
    """Run the sorter file by file under a progress bar.

    Returns None if interrupted; the file being sorted is always finished.
    """
    report = sorter.begin_run(dry_run)
    files = sorter.find_source_files()
    if not files:
        return report

    with Progress(console=console) as progress, _InterruptFlag() as interrupt:
        task = progress.add_task("Sorting files...", total=len(files))
        sorter.progress = ProgressContext(progress, task)
        for file in files:
            if interrupt.requested:
                return None
            sorter.sort_file(file, report)
            sorter.progress.advance()

    return report


def main(config_path: Optional[Path] = None, argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to the preferences file (for testing)
        argv: Optional argument list instead of sys.argv
    """
    config = Config(config_path=config_path)
    parser = create_parser(config)
    args = parser.parse_args(argv)

    # Detect if running with no paths at all (using saved config)
    using_saved_config = args.source is None and args.target is None and \
        args.source_override is None and args.target_override is None and \
        args.config is None

    if args.version:
        from . import __version__, __copyright__
        if args.verbose:
            print(f"{PROGRAM} version {__version__} {__copyright__}")
            print(f"Config: {config.config_path}")
            return EXIT_OK
        print(__version__)
        return EXIT_OK

    console = get_console()
    logger = setup_logging(console, args.verbose, args.log_file)

    try:
        settings = build_settings(args, config)
        if not settings["source"] or not settings["target"]:
            parser.error("Source and target directories are required")
        settings["source"] = Path(settings["source"]).expanduser().resolve()
        settings["target"] = Path(settings["target"]).expanduser().resolve()
        sort_config = SortConfig.from_dict(settings)
        sorter = Sorter(sort_config, logger=logger)
        sorter.validate()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True, highlight=False)
        return EXIT_FAILED

    config.update_paths(str(sort_config.source), str(sort_config.target))
    config.update_defaults(
        date_format=args.date_format,
        date_type=args.date_type,
        preserve_name=args.preserve_name,
        exclude_type=args.exclude_type,
        only_type=args.only_type,
    )

    show_processing_plan(sort_config, args.dry_run, console)

    if using_saved_config and not args.yes:
        if not confirm_processing(console):
            return EXIT_OK

    try:
        report = run_sorter(sorter, args.dry_run, console)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True, highlight=False)
        return EXIT_FAILED

    if report is None:
        console.print("\n[red]Operation cancelled by user[/red]")
        return EXIT_INTERRUPTED

    if report.eligible == 0 and report.skipped == 0:
        console.print("[yellow]No files found in source directory[/yellow]")
        return EXIT_OK

    if args.dry_run or args.verbose:
        print_moves(report, console)
    print_summary(report, console)

    if report.success:
        console.print("\n[green]✓ Sorting completed successfully![/green]")
        return EXIT_OK

    console.print(f"\n[yellow]Sorting finished with {report.failed} failed file(s)[/yellow]")
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
