"""Interactive command surface for a capture session."""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import TYPE_CHECKING, Optional, TextIO

from rich.console import Console
from rich.table import Table

from .capture.session import CaptureSession

if TYPE_CHECKING:
    from .dom.browser import BrowserDocument
    from .models.config import BrowserConfig

logger = logging.getLogger(__name__)

COMMANDS = {
    "start": "Scan the page and capture new messages as they load",
    "stop": "Stop capturing",
    "stats": "Show how many records are collected",
    "export": "Write collected records to a JSON file (also Ctrl+Shift+S in the page)",
    "clear": "Drop collected records",
    "help": "Show this list",
    "quit": "Close the browser and exit",
}

ALIASES = {"exit": "quit", "q": "quit", "?": "help", "exportjson": "export", "clearall": "clear"}

_EOF = object()


class CommandConsole:
    """
    Maps typed commands to CaptureSession operations.

    Example:
        commands = CommandConsole(session, Console())
        commands.execute("start")
        commands.execute("stats")
    """

    def __init__(self, session: CaptureSession, console: Optional[Console] = None) -> None:
        self.session = session
        self.console = console or Console()

    def execute(self, line: str) -> bool:
        """
        Run one command line.

        Returns:
            False when the console should exit
        """
        command = line.strip().lower()
        if not command:
            return True
        command = ALIASES.get(command, command)

        if command == "quit":
            return False
        if command == "start":
            self.session.start()
            self.console.print(f"[green]Capturing.[/green] {self.session.stats()['collected']} records so far")
        elif command == "stop":
            self.session.stop()
            self.console.print("[yellow]Stopped.[/yellow]")
        elif command == "stats":
            self.print_stats()
        elif command == "export":
            self.export()
        elif command == "clear":
            self.session.clear()
            self.console.print("Cleared collected records.")
        elif command == "help":
            self.print_help()
        else:
            self.console.print(f"[red]Unknown command:[/red] {command} (type 'help')")
        return True

    def export(self) -> None:
        try:
            path = self.session.export_json()
        except OSError as e:
            self.console.print(f"[red]Export failed:[/red] {e}")
            return
        self.console.print(f"[green]Exported {self.session.stats()['collected']} records:[/green] {path}")

    def print_stats(self) -> None:
        stats = self.session.stats()
        counters = self.session.counters
        table = Table(show_header=False, box=None)
        table.add_column("Key", style="bold")
        table.add_column("Value")
        table.add_row("collected", str(stats["collected"]))
        table.add_row("running", str(stats["running"]).lower())
        table.add_row("duplicates", str(counters.duplicates))
        table.add_row("failed", str(counters.failed))
        self.console.print(table)

    def print_help(self) -> None:
        table = Table(title="Commands", show_header=False, box=None)
        table.add_column("Command", style="bold cyan")
        table.add_column("Description")
        for name, description in COMMANDS.items():
            table.add_row(name, description)
        self.console.print(table)


def _read_lines(stream: TextIO, lines: queue.Queue) -> None:
    for line in stream:
        lines.put(line)
    lines.put(_EOF)


def run_interactive(
    commands: CommandConsole,
    document: BrowserDocument,
    config: BrowserConfig,
    selector: str,
    stream: TextIO,
    poll_ms: int = 200,
) -> None:
    """
    Run the command loop against a live page.

    Commands are read from ``stream`` on a background thread; the main
    thread keeps the page running so mutation batches and the export
    shortcut are delivered between commands.

    Args:
        commands: Command dispatcher bound to the session
        document: Live page document
        config: Browser settings (auto-scroll, shortcut)
        selector: Message selector, used to find the feed when scrolling
        stream: Where commands are read from (usually stdin)
        poll_ms: How long to let the page run between command checks
    """
    lines: queue.Queue = queue.Queue()
    reader = threading.Thread(target=_read_lines, args=(stream, lines), daemon=True)
    reader.start()

    if config.export_shortcut:
        document.bind_export_shortcut(commands.export)

    last_scroll = time.monotonic()
    while True:
        try:
            document.pump(poll_ms)
        except Exception as e:
            logger.info(f"Page closed: {e}")
            break

        if config.auto_scroll and commands.session.running:
            now = time.monotonic()
            if now - last_scroll >= config.scroll_delay:
                document.scroll_feed(config.scroll_container, selector)
                last_scroll = now

        keep_going = True
        while keep_going:
            try:
                line = lines.get_nowait()
            except queue.Empty:
                break
            if line is _EOF:
                keep_going = False
            else:
                keep_going = commands.execute(line)
        if not keep_going:
            break

    commands.session.stop()
