"""In-memory document backed by BeautifulSoup."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Union

import soupsieve
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

from .protocols import MutationBatch, MutationCallback

DEFAULT_PARSER = "html.parser"

# Elements whose start and end break the line in rendered text
BLOCK_TAGS = frozenset(
    """
    address article aside blockquote dd details div dl dt fieldset figcaption figure
    footer form h1 h2 h3 h4 h5 h6 header hr li main nav ol p pre section summary
    table tr ul
    """.split()
)

# Elements that never render text
HIDDEN_TAGS = frozenset({"head", "script", "style", "template", "noscript"})

_SPACE_RUN = re.compile(r"[ \t\n\r\f]+")
_INLINE_SPACE = re.compile(r"[ \t]+")


def _render(tag: Tag, parts: list[str]) -> None:
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name == "br":
                parts.append("\n")
            elif child.name in HIDDEN_TAGS:
                continue
            elif child.name in BLOCK_TAGS:
                if parts and not parts[-1].endswith("\n"):
                    parts.append("\n")
                _render(child, parts)
                if parts and not parts[-1].endswith("\n"):
                    parts.append("\n")
            else:
                _render(child, parts)
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # Source formatting (newlines, indentation) collapses to one space
            parts.append(_SPACE_RUN.sub(" ", str(child)))


def rendered_text(tag: Tag) -> str:
    """
    Approximate a browser's ``innerText`` for a tag.

    ``<br>`` and block element boundaries become line breaks; runs of
    source whitespace collapse to one space and are trimmed per line.
    Comments and script/style content are dropped.
    """
    parts: list[str] = []
    _render(tag, parts)
    lines = [_INLINE_SPACE.sub(" ", line).strip() for line in "".join(parts).split("\n")]
    return "\n".join(lines).strip("\n")


class SoupNode:
    """Non-element node (text, comment) reported in a mutation batch."""

    is_element = False

    def __init__(self, node: PageElement) -> None:
        self.node = node

    def __repr__(self) -> str:
        return f"SoupNode({str(self.node)[:40]!r})"


class SoupElement:
    """Element wrapper around a BeautifulSoup Tag."""

    is_element = True

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    @property
    def text(self) -> str:
        return rendered_text(self.tag)

    def matches(self, selector: str) -> bool:
        return soupsieve.match(selector, self.tag)

    def select(self, selector: str) -> list[SoupElement]:
        return [SoupElement(tag) for tag in soupsieve.select(selector, self.tag)]

    def dispose(self) -> None:
        pass

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupElement) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)

    def __repr__(self) -> str:
        return f"SoupElement(<{self.tag.name}>)"


def wrap_node(node: PageElement) -> Union[SoupElement, SoupNode]:
    """Wrap a parse-tree node in the matching host type."""
    if isinstance(node, Tag):
        return SoupElement(node)
    return SoupNode(node)


class SoupSubscription:
    """Subscription handle returned by HtmlDocument.subscribe()."""

    def __init__(self, document: HtmlDocument, callback: MutationCallback) -> None:
        self._document = document
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._document._detach(self)


class HtmlDocument:
    """
    A document that grows as HTML fragments are appended.

    Mirrors how a chat page renders: new messages arrive as fragments
    inserted under some container, and every insertion is reported to
    subscribers as one MutationBatch. Delivery is synchronous; append()
    returns after every subscriber has handled the batch.

    Example:
        doc = HtmlDocument("<div id='feed'></div>")
        sub = doc.subscribe(lambda batch: print(len(batch.added_nodes)))
        doc.append("<div class='message'>hi</div>", parent="#feed")
        sub.cancel()
    """

    def __init__(self, html: str = "", parser: str = DEFAULT_PARSER) -> None:
        self._parser = parser
        self.soup = BeautifulSoup(html, parser)
        self._subscriptions: list[SoupSubscription] = []

    @classmethod
    def from_file(cls, path: Path, parser: str = DEFAULT_PARSER) -> HtmlDocument:
        """Load a saved page."""
        return cls(path.read_text(encoding="utf-8", errors="replace"), parser=parser)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def select(self, selector: str) -> list[SoupElement]:
        return [SoupElement(tag) for tag in soupsieve.select(selector, self.soup)]

    def subscribe(self, callback: MutationCallback) -> SoupSubscription:
        subscription = SoupSubscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def _detach(self, subscription: SoupSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def append(self, html: str, parent: str | None = None) -> MutationBatch:
        """
        Insert an HTML fragment and notify subscribers.

        Args:
            html: Fragment to insert; may hold several top-level nodes
            parent: Selector of the container (defaults to body, then root)

        Returns:
            The batch that was delivered

        Raises:
            ValueError: If ``parent`` matches nothing
        """
        container = self._container(parent)
        fragment = BeautifulSoup(html, self._parser)
        nodes = list(fragment.contents)
        for node in nodes:
            container.append(node.extract())
        batch = MutationBatch(added_nodes=[wrap_node(node) for node in nodes])
        self.notify(batch)
        return batch

    def add_text(self, text: str, parent: str | None = None) -> MutationBatch:
        """Insert a bare text node and notify subscribers."""
        container = self._container(parent)
        node = NavigableString(text)
        container.append(node)
        batch = MutationBatch(added_nodes=[SoupNode(node)])
        self.notify(batch)
        return batch

    def notify(self, batch: MutationBatch) -> None:
        """Deliver a batch to every active subscriber."""
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.callback(batch)

    def _container(self, parent: str | None) -> Tag:
        if parent is not None:
            found = soupsieve.select_one(parent, self.soup)
            if found is None:
                raise ValueError(f"No element matches parent selector: {parent}")
            return found
        return self.soup.body or self.soup

    def __str__(self) -> str:
        return str(self.soup)
