"""Smoke tests for the command line and the interactive command console."""

import io
import json

import pytest
from rich.console import Console
from tggrab.capture.session import CaptureSession
from tggrab.cli import build_config, create_parser, main
from tggrab.console import CommandConsole
from tggrab.export.json_export import JsonExporter

PAGE = """
<html><body><div id="feed">
<div class="message-content-wrapper"><div class="message-content">one https://a.example/1,</div></div>
<div class="message-content-wrapper"><div class="message-content">two</div></div>
<div class="message-content-wrapper"><div class="message-content">one https://a.example/1,</div></div>
</div></body></html>
"""


@pytest.fixture
def saved_page(tmp_path):
    path = tmp_path / "chat.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


class TestExtractCommand:
    """Tests for `tggrab extract`."""

    def test_extract_writes_export(self, saved_page, tmp_path):
        """Extract captures unique messages and writes one export file."""
        out = tmp_path / "exports"
        assert main(["extract", str(saved_page), "-o", str(out), "-q"]) == 0

        files = list(out.glob("telegram_saved_export_*.json"))
        assert len(files) == 1
        data = json.loads(files[0].read_text(encoding="utf-8"))
        assert [item["text"] for item in data] == ["one https://a.example/1,", "two"]
        assert data[0]["urls"] == ["https://a.example/1"]

    def test_extract_stdout(self, saved_page, capsys):
        """--stdout prints the JSON array instead of writing a file."""
        assert main(["extract", str(saved_page), "--stdout", "-q"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data) == 2

    def test_extract_custom_selector(self, saved_page, capsys):
        """A selector that matches nothing exports an empty array."""
        assert main(["extract", str(saved_page), "--selector", ".nothing", "--stdout", "-q"]) == 0
        assert json.loads(capsys.readouterr().out) == []

    def test_extract_missing_file(self, tmp_path):
        """A missing page is an error."""
        assert main(["extract", str(tmp_path / "missing.html"), "-q"]) == 1

    def test_extract_with_config_file(self, saved_page, tmp_path, capsys):
        """Settings come from a YAML config file."""
        pytest.importorskip("yaml")
        config = tmp_path / "tggrab.yaml"
        config.write_text("selector: '#feed .message-content'\n", encoding="utf-8")
        assert main(["extract", str(saved_page), "-c", str(config), "--stdout", "-q"]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 2

    def test_extract_bad_selector(self, saved_page, capsys):
        """A malformed selector is a configuration error, not a traceback."""
        assert main(["extract", str(saved_page), "--selector", "div[[", "--stdout", "-q"]) == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_extract_malformed_config_file(self, saved_page, tmp_path, capsys):
        """Broken YAML in --config is a configuration error."""
        pytest.importorskip("yaml")
        config = tmp_path / "tggrab.yaml"
        config.write_text("selector: [unclosed\n", encoding="utf-8")
        assert main(["extract", str(saved_page), "-c", str(config), "-q"]) == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_output_dir_before_command(self, saved_page, tmp_path):
        """-o given before the subcommand still sets the export directory."""
        out = tmp_path / "exports"
        assert main(["-o", str(out), "extract", str(saved_page), "-q"]) == 0
        assert len(list(out.glob("telegram_saved_export_*.json"))) == 1

    def test_no_command(self, capsys):
        """Running without a command prints help."""
        assert main([]) == 1
        assert "extract" in capsys.readouterr().out


class TestBuildConfig:
    """Tests for merging CLI arguments into config."""

    def test_watch_overrides(self, tmp_path):
        """Browser flags land in the browser section."""
        args = create_parser().parse_args(
            [
                "watch",
                "https://web.telegram.org/a/",
                "--user-data-dir",
                str(tmp_path / "profile"),
                "--auto-scroll",
                "--no-shortcut",
                "--fingerprint",
                "djb2",
                "-v",
            ]
        )
        config = build_config(args)
        assert config.browser.url == "https://web.telegram.org/a/"
        assert config.browser.user_data_dir == tmp_path / "profile"
        assert config.browser.auto_scroll is True
        assert config.browser.export_shortcut is False
        assert config.capture.fingerprint == "djb2"
        assert config.log_level == "DEBUG"

    def test_watch_requires_url(self, capsys):
        """watch without a URL fails before opening a browser."""
        assert main(["watch", "-q"]) == 1


class TestCommandConsole:
    """Tests for the interactive command dispatcher."""

    @pytest.fixture
    def output(self):
        return io.StringIO()

    @pytest.fixture
    def commands(self, feed_document, tmp_path, output):
        session = CaptureSession(feed_document, exporter=JsonExporter(directory=tmp_path))
        return CommandConsole(session, Console(file=output, width=120))

    def test_start_stats_stop(self, commands, output):
        """start, stats and stop drive the session."""
        assert commands.execute("start") is True
        assert commands.session.stats() == {"collected": 2, "running": True}
        commands.execute("stats")
        assert "collected" in output.getvalue()
        commands.execute("stop")
        assert commands.session.stats()["running"] is False

    def test_export(self, commands, tmp_path, output):
        """export writes a file into the exporter directory."""
        commands.execute("start")
        commands.execute("export")
        assert len(list(tmp_path.glob("telegram_saved_export_*.json"))) == 1
        assert "Exported 2 records" in output.getvalue()

    def test_clear(self, commands):
        """clear (or clearAll) empties the store."""
        commands.execute("start")
        commands.execute("clearAll")
        assert commands.session.stats() == {"collected": 0, "running": True}

    def test_quit(self, commands):
        """quit and its aliases end the loop."""
        assert commands.execute("quit") is False
        assert commands.execute("exit") is False

    def test_blank_and_unknown(self, commands, output):
        """Blank lines are ignored; unknown commands are reported."""
        assert commands.execute("   ") is True
        assert commands.execute("dance") is True
        assert "Unknown command" in output.getvalue()

    def test_help(self, commands, output):
        """help lists every command."""
        commands.execute("help")
        for name in ("start", "stop", "stats", "export", "clear", "quit"):
            assert name in output.getvalue()


class TestDoctor:
    """Tests for diagnostic checks."""

    def test_check_dependency(self):
        """Importable modules pass; missing optional ones warn."""
        from tggrab.doctor import check_dependency

        assert check_dependency("json") == (True, "[OK] json")
        ok, message = check_dependency("tggrab_no_such_module", "nothing", optional=True)
        assert ok is False
        assert "optional" in message

    def test_check_output_dir(self, tmp_path):
        """A fresh directory is writable and left clean."""
        from tggrab.doctor import check_output_dir

        ok, _ = check_output_dir(tmp_path / "exports")
        assert ok is True
        assert list((tmp_path / "exports").iterdir()) == []
