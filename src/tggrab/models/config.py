"""Pydantic configuration models for tggrab."""

from pathlib import Path
from typing import Literal, Optional

import soupsieve
from pydantic import BaseModel, Field, field_validator

DEFAULT_SELECTOR = ".message-content-wrapper .message-content"
DEFAULT_EXPORT_PREFIX = "telegram_saved_export_"


def check_selector(value: str) -> str:
    """Reject CSS selectors that do not compile."""
    try:
        soupsieve.compile(value)
    except soupsieve.SelectorSyntaxError as e:
        raise ValueError(f"Invalid CSS selector {value!r}: {e}") from e
    return value


class CaptureConfig(BaseModel):
    """Configuration for the capture pipeline."""

    fingerprint: Literal["djb2", "sha256"] = Field(
        "sha256",
        description="Fingerprint algorithm used as the deduplication key",
    )

    model_config = {"extra": "forbid"}


class ExportConfig(BaseModel):
    """Configuration for JSON export."""

    directory: Path = Field(Path("."), description="Directory for exported JSON files")
    prefix: str = Field(
        DEFAULT_EXPORT_PREFIX,
        min_length=1,
        description="Filename prefix; a timestamp and .json are appended",
    )
    indent: int = Field(2, ge=0, description="JSON indentation (0 = compact)")

    model_config = {"extra": "forbid"}


class BrowserConfig(BaseModel):
    """Configuration for live capture in a Playwright-driven browser."""

    url: Optional[str] = Field(None, description="Page to open (e.g. https://web.telegram.org/a/)")
    headless: bool = Field(False, description="Run browser without a window")
    user_data_dir: Optional[Path] = Field(
        None,
        description="Persistent profile directory, keeps the chat session logged in",
    )
    timeout: float = Field(30.0, gt=0, description="Default timeout for page operations (seconds)")
    auto_scroll: bool = Field(False, description="Periodically scroll the feed to load older messages")
    scroll_container: Optional[str] = Field(
        None,
        description="Selector of the scrollable feed (defaults to the first matched message's scroll parent)",
    )
    scroll_delay: float = Field(1.5, gt=0, description="Seconds between auto-scroll steps")
    export_shortcut: bool = Field(True, description="Bind Ctrl+Shift+S in the page to export")

    model_config = {"extra": "forbid"}

    @field_validator("scroll_container")
    @classmethod
    def _check_scroll_container(cls, value: Optional[str]) -> Optional[str]:
        return check_selector(value) if value is not None else None


class TggrabConfig(BaseModel):
    """
    Root configuration model for tggrab.

    Example:
        config = TggrabConfig(
            selector=".message .text-content",
            export=ExportConfig(directory=Path("./exports")),
        )

    YAML format:
        selector: .message .text-content
        capture:
          fingerprint: djb2
        export:
          directory: ./exports
        browser:
          url: https://web.telegram.org/a/
          user_data_dir: ./profile
    """

    selector: str = Field(
        DEFAULT_SELECTOR,
        min_length=1,
        description="CSS selector that matches one message element",
    )

    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    @field_validator("selector")
    @classmethod
    def _check_selector(cls, value: str) -> str:
        return check_selector(value)

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "TggrabConfig":
        """Load config from YAML string."""
        import yaml

        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "TggrabConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text(encoding="utf-8"))
