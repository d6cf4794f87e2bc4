"""Tests for configuration models."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from tggrab.models.config import DEFAULT_SELECTOR, TggrabConfig


class TestTggrabConfig:
    """Tests for TggrabConfig."""

    def test_defaults(self):
        """Defaults match the chat page layout and export naming."""
        config = TggrabConfig()
        assert config.selector == DEFAULT_SELECTOR == ".message-content-wrapper .message-content"
        assert config.capture.fingerprint == "sha256"
        assert config.export.prefix == "telegram_saved_export_"
        assert config.export.indent == 2
        assert config.browser.export_shortcut is True
        assert config.log_level == "INFO"

    def test_nested_dicts(self):
        """Nested sections accept plain dicts."""
        config = TggrabConfig(capture={"fingerprint": "djb2"}, export={"directory": "/tmp/x"})
        assert config.capture.fingerprint == "djb2"
        assert config.export.directory == Path("/tmp/x")

    def test_unknown_field_rejected(self):
        """Typos in config are errors."""
        with pytest.raises(ValidationError):
            TggrabConfig(selecter=".x")

    def test_bad_fingerprint_rejected(self):
        """Only known algorithms are accepted."""
        with pytest.raises(ValidationError):
            TggrabConfig(capture={"fingerprint": "md5"})

    def test_empty_selector_rejected(self):
        """A selector is required."""
        with pytest.raises(ValidationError):
            TggrabConfig(selector="")

    def test_yaml_round_trip(self):
        """Config survives a trip through YAML."""
        pytest.importorskip("yaml")
        config = TggrabConfig(
            selector=".msg",
            browser={"url": "https://web.telegram.org/a/", "auto_scroll": True},
        )
        loaded = TggrabConfig.from_yaml(config.to_yaml())
        assert loaded == config

    def test_yaml_file(self, tmp_path):
        """Config loads from a YAML file."""
        pytest.importorskip("yaml")
        path = tmp_path / "tggrab.yaml"
        path.write_text("selector: .bubble .text\ncapture:\n  fingerprint: djb2\n", encoding="utf-8")
        config = TggrabConfig.from_yaml_file(path)
        assert config.selector == ".bubble .text"
        assert config.capture.fingerprint == "djb2"

    def test_empty_yaml(self):
        """An empty document gives the defaults."""
        pytest.importorskip("yaml")
        assert TggrabConfig.from_yaml("") == TggrabConfig()

    def test_malformed_selector_rejected(self):
        """Selectors that do not compile are rejected up front."""
        with pytest.raises(ValidationError, match="Invalid CSS selector"):
            TggrabConfig(selector="div[[")

    def test_malformed_scroll_container_rejected(self):
        """The scroll container selector is checked too."""
        with pytest.raises(ValidationError):
            TggrabConfig(browser={"scroll_container": "#feed >"})
        assert TggrabConfig(browser={"scroll_container": "#feed"}).browser.scroll_container == "#feed"

    def test_malformed_yaml(self):
        """Broken YAML is reported as a ValueError."""
        pytest.importorskip("yaml")
        with pytest.raises(ValueError, match="Invalid YAML"):
            TggrabConfig.from_yaml("selector: [unclosed")
