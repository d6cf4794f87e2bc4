"""Shared fixtures for tggrab tests."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from tggrab.dom.soup import HtmlDocument

FEED_PAGE = """
<html><body>
<div id="feed">
  <div class="message-content-wrapper">
    <div class="message-content">First message https://example.com/a.</div>
  </div>
  <div class="message-content-wrapper">
    <div class="message-content">Second message</div>
  </div>
</div>
</body></html>
"""


def message(text: str) -> str:
    """HTML for one wrapped message."""
    return f'<div class="message-content-wrapper"><div class="message-content">{text}</div></div>'


@pytest.fixture
def feed_document():
    """Document with two rendered messages inside #feed."""
    return HtmlDocument(FEED_PAGE)


@pytest.fixture
def empty_feed():
    """Document with an empty #feed container."""
    return HtmlDocument('<html><body><div id="feed"></div></body></html>')


@pytest.fixture
def clock():
    """Clock that advances one second per call, starting 2024-05-01T10:00:00Z."""
    start = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)
    calls = {"n": 0}

    def tick():
        value = start + timedelta(seconds=calls["n"])
        calls["n"] += 1
        return value

    return tick


@pytest.fixture(autouse=True)
def reset_tggrab_logger():
    """Undo setup_logging() between tests."""
    yield
    logger = logging.getLogger("tggrab")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_message():
    """Factory for wrapped message HTML."""
    return message
