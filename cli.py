from __future__ import annotations

import argparse
import signal
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel

from versedb.config import AggregatorConfig
from versedb.discovery.project_locator import SearchMode
from versedb.errors import VerseDbError
from versedb.runtime.app_runner import AppRunner, RunResult
from versedb.ui.prompts import ScriptedPrompt, TerminalPrompt

console = Console()


def _handle_sigint(signum, frame) -> None:
    console.print("\n[yellow][INTERRUPTED] Aggregation stopped by user (Ctrl+C). "
                  "The database file may be incomplete.[/yellow]")
    raise SystemExit(130)  # 130 is the conventional exit code for SIGINT


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="verse-db",
        description="Collect every Verse source file into a single code database document.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Database file to (re)generate. Default: ./verse_code_database.md or $VERSE_DB_OUTPUT.",
    )
    parser.add_argument(
        "--pattern",
        type=str,
        default=None,
        help="File name glob to collect. Default: *.verse",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--directory",
        type=str,
        default=None,
        help="Aggregate this project folder without prompting.",
    )
    mode.add_argument(
        "--scan-all",
        action="store_true",
        help="Scan well-known locations and every mounted drive without prompting.",
    )

    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Only log to the console.",
    )
    return parser


def _print_summary(result: RunResult) -> None:
    s = result.summary
    console.print(
        Panel(
            f"[bold green]Done![/bold green] Database written to {result.output_path}\n"
            f"Projects processed: {s.projects_processed}\n"
            f"Projects skipped:   {s.projects_failed}\n"
            f"Files written:      {s.files_written}\n"
            f"Files skipped:      {s.files_skipped}",
            border_style="green",
        )
    )


def main(argv: list[str] | None = None) -> int:
    signal.signal(signal.SIGINT, _handle_sigint)

    load_dotenv()

    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.directory and not Path(args.directory).expanduser().is_dir():
        parser.error(f"--directory: not a directory: {args.directory}")

    try:
        config = AggregatorConfig.from_env().with_overrides(
            output_path=args.output,
            pattern=args.pattern,
            log_to_file=False if args.no_log_file else None,
        )
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        return 1

    mode = None
    if args.directory:
        prompt = ScriptedPrompt(directory=str(Path(args.directory).expanduser()))
        mode = SearchMode.EXPLICIT_DIRECTORY
    elif args.scan_all:
        prompt = ScriptedPrompt()
        mode = SearchMode.WHOLE_FILESYSTEM_SCAN
    else:
        prompt = TerminalPrompt()

    console.print(Panel.fit("[bold cyan]Verse Code Database[/bold cyan]", border_style="cyan"))

    try:
        result = AppRunner(config, prompt).run(mode)
    except VerseDbError as e:
        console.print(f"[bold red]Aborted:[/bold red] {e}")
        return 1

    _print_summary(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
