"""Command-line interface for tggrab."""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .capture.session import CaptureSession
from .console import CommandConsole, run_interactive
from .dom.soup import HtmlDocument
from .logging_config import setup_logging
from .models.config import TggrabConfig


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML config file (requires pyyaml)",
    )
    common.add_argument(
        "--selector",
        "-s",
        type=str,
        default=None,
        help="CSS selector matching one message element",
    )
    common.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=None,
        help="Directory for exported JSON (default: current directory)",
    )
    common.add_argument(
        "--fingerprint",
        choices=["sha256", "djb2"],
        default=None,
        help="Deduplication fingerprint algorithm (default: sha256)",
    )
    common.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    common.add_argument("--quiet", "-q", action="store_true", help="Suppress output")

    parser = argparse.ArgumentParser(
        prog="tggrab",
        description="Harvest messages from a scrolling chat feed into deduplicated JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Capture messages from a saved page
  tggrab extract saved_chat.html -o ./exports

  # Capture live while you scroll (requires tggrab[browser])
  tggrab watch https://web.telegram.org/a/ --user-data-dir ./profile

  # Use a different message selector
  tggrab extract page.html --selector ".message .text-content"
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--doctor", action="store_true", help="Run diagnostic checks")
    parser.add_argument(
        "--output-dir",
        "-o",
        dest="root_output_dir",
        type=Path,
        default=None,
        help=argparse.SUPPRESS,
    )

    subparsers = parser.add_subparsers(dest="command")

    extract = subparsers.add_parser(
        "extract",
        parents=[common],
        help="Capture messages from a saved HTML page",
    )
    extract.add_argument("page", type=Path, help="Saved HTML page")
    extract.add_argument(
        "--stdout",
        action="store_true",
        help="Print the JSON array instead of writing a file",
    )

    watch = subparsers.add_parser(
        "watch",
        parents=[common],
        help="Open a browser and capture messages as the feed loads",
    )
    watch.add_argument("url", nargs="?", default=None, help="Page to open")
    watch.add_argument(
        "--user-data-dir",
        type=Path,
        default=None,
        metavar="DIR",
        help="Persistent browser profile (keeps you logged in)",
    )
    watch.add_argument("--headless", action="store_true", help="Run browser without a window")
    watch.add_argument(
        "--auto-scroll",
        action="store_true",
        help="Scroll the feed automatically while capturing",
    )
    watch.add_argument(
        "--scroll-container",
        type=str,
        default=None,
        metavar="SELECTOR",
        help="Scrollable feed element (default: detected from the first message)",
    )
    watch.add_argument(
        "--no-shortcut",
        action="store_true",
        help="Do not bind Ctrl+Shift+S to export",
    )
    watch.add_argument(
        "--start",
        action="store_true",
        help="Start capturing immediately",
    )

    return parser


def build_config(args: argparse.Namespace) -> TggrabConfig:
    """Merge a config file (if any) with command-line overrides."""
    if args.config is not None:
        base = TggrabConfig.from_yaml_file(args.config)
    else:
        base = TggrabConfig()
    data: dict[str, Any] = base.model_dump()

    if args.selector:
        data["selector"] = args.selector
    # -o may be given before or after the subcommand
    output_dir = args.output_dir if args.output_dir is not None else args.root_output_dir
    if output_dir is not None:
        data["export"]["directory"] = output_dir
    if args.fingerprint:
        data["capture"]["fingerprint"] = args.fingerprint

    if args.command == "watch":
        browser = data["browser"]
        if args.url:
            browser["url"] = args.url
        if args.user_data_dir is not None:
            browser["user_data_dir"] = args.user_data_dir
        if args.headless:
            browser["headless"] = True
        if args.auto_scroll:
            browser["auto_scroll"] = True
        if args.scroll_container:
            browser["scroll_container"] = args.scroll_container
        if args.no_shortcut:
            browser["export_shortcut"] = False

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return TggrabConfig.model_validate(data)


def run_extract(args: argparse.Namespace, config: TggrabConfig, console: Console) -> int:
    """Capture from a saved page and export."""
    if not args.page.is_file():
        console.print(f"[red]Error:[/red] No such file: {args.page}")
        return 1

    document = HtmlDocument.from_file(args.page)
    session = CaptureSession.from_config(document, config)
    session.start()
    session.stop()

    counters = session.counters
    if args.stdout:
        print(session.exporter.dumps(session.snapshot()))
        return 0

    path = session.export_json()
    if not args.quiet:
        console.print(f"[bold blue]tggrab[/bold blue] v{__version__}")
        if counters.seen == 0:
            console.print(f"[yellow]No elements matched[/yellow] {config.selector}")
        console.print()
        console.print("[bold]Results:[/bold]")
        console.print(f"  Records captured: {counters.captured}")
        console.print(f"  Duplicates skipped: {counters.duplicates}")
        console.print(f"  Empty skipped: {counters.empty}")
        console.print(f"  Unreadable: {counters.failed}")
        console.print(f"  Output: {path}")
    return 0


def run_watch(args: argparse.Namespace, config: TggrabConfig, console: Console) -> int:
    """Open a browser and run the interactive capture console."""
    from .dom.browser import BrowserDocument, BrowserSession

    if not config.browser.url:
        console.print("[red]Error:[/red] Please provide a URL to open")
        return 1

    try:
        with BrowserSession(config.browser) as page:
            document = BrowserDocument(page)
            session = CaptureSession.from_config(document, config)
            commands = CommandConsole(session, console)

            if not args.quiet:
                console.print(f"[bold blue]tggrab[/bold blue] v{__version__}")
                console.print(f"Selector: {config.selector}")
                commands.print_help()
            if args.start:
                commands.execute("start")

            run_interactive(commands, document, config.browser, config.selector, sys.stdin)
            console.print(f"Collected {session.stats()['collected']} records.")
    except ImportError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console()

    if args.doctor:
        from .doctor import run_doctor

        return run_doctor(output_dir=args.root_output_dir, console=console)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = build_config(args)
    except (ValidationError, OSError, ValueError, ImportError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
        force=True,
    )

    if args.command == "extract":
        return run_extract(args, config, console)
    return run_watch(args, config, console)


if __name__ == "__main__":
    sys.exit(main())
