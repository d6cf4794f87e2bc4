"""Live document backed by a Playwright page (sync API)."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any, Callable, Optional

from .protocols import MutationBatch, MutationCallback

logger = logging.getLogger(__name__)

# Check for Playwright availability
PLAYWRIGHT_AVAILABLE = False
try:
    from playwright.sync_api import sync_playwright

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    pass

if TYPE_CHECKING:
    from playwright.sync_api import BrowserContext, ElementHandle, JSHandle, Page, Playwright

    from ..models.config import BrowserConfig

MUTATION_BINDING = "__tggrabMutations"
SHORTCUT_BINDING = "__tggrabExport"
ELEMENT_NODE = 1

# Hands every batch of added nodes to the Python binding as one handle,
# with node types alongside so text nodes need no extra round trip
OBSERVER_SCRIPT = """
(binding) => {
    if (window.__tggrabObserver) return false;
    const observer = new MutationObserver((mutations) => {
        const nodes = [];
        for (const m of mutations) {
            m.addedNodes.forEach((node) => nodes.push(node));
        }
        if (nodes.length) window[binding]({ nodes, kinds: nodes.map((n) => n.nodeType) });
    });
    observer.observe(document.body, { childList: true, subtree: true });
    window.__tggrabObserver = observer;
    return true;
}
"""

DISCONNECT_SCRIPT = """
() => {
    if (!window.__tggrabObserver) return false;
    window.__tggrabObserver.disconnect();
    delete window.__tggrabObserver;
    return true;
}
"""

# Ctrl+Shift+S
SHORTCUT_SCRIPT = """
(binding) => {
    if (window.__tggrabShortcut) return;
    window.__tggrabShortcut = (e) => {
        if (e.ctrlKey && e.shiftKey && e.code === 'KeyS') {
            e.preventDefault();
            window[binding]();
        }
    };
    window.addEventListener('keydown', window.__tggrabShortcut);
}
"""

# Scroll the feed up by one screen so the page loads older messages
SCROLL_SCRIPT = """
([container, message]) => {
    let el = container ? document.querySelector(container) : null;
    if (!el && message) {
        let node = document.querySelector(message);
        while (node && node !== document.body) {
            const style = getComputedStyle(node);
            if (/(auto|scroll)/.test(style.overflowY) && node.scrollHeight > node.clientHeight) {
                el = node;
                break;
            }
            node = node.parentElement;
        }
    }
    el = el || document.scrollingElement;
    if (!el) return false;
    el.scrollBy(0, -el.clientHeight);
    return true;
}
"""


def release(handle: JSHandle) -> None:  # type: ignore[no-any-unimported]
    """Dispose a remote handle, ignoring pages that are already gone."""
    try:
        handle.dispose()
    except Exception as e:
        logger.debug(f"Could not dispose handle: {e}")


class BrowserNode:
    """Non-element node reported by the page."""

    is_element = False

    def __repr__(self) -> str:
        return "BrowserNode()"


class BrowserElement:
    """Element wrapper around a Playwright ElementHandle."""

    is_element = True

    def __init__(self, handle: ElementHandle) -> None:  # type: ignore[no-any-unimported]
        self.handle = handle
        self._disposed = False

    @property
    def text(self) -> str:
        return self.handle.inner_text()

    def matches(self, selector: str) -> bool:
        return bool(self.handle.evaluate("(el, sel) => el.matches(sel)", selector))

    def select(self, selector: str) -> list[BrowserElement]:
        return [BrowserElement(h) for h in self.handle.query_selector_all(selector)]

    def dispose(self) -> None:
        """Let the page release the element."""
        if self._disposed:
            return
        self._disposed = True
        release(self.handle)

    def __repr__(self) -> str:
        return f"BrowserElement({self.handle!r})"


class BrowserSubscription:
    """Subscription handle returned by BrowserDocument.subscribe()."""

    def __init__(self, document: BrowserDocument, callback: MutationCallback) -> None:
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


class BrowserDocument:
    """
    The DOM of a live page, observed through a page-side MutationObserver.

    Added nodes are passed to Python as element handles, so selector
    matching and nested search run in the browser with the same
    semantics as ``Element.matches`` / ``querySelectorAll``. Batches are
    delivered on the Playwright dispatcher while the caller is inside a
    Playwright call (e.g. ``page.wait_for_timeout``).

    Example:
        with BrowserSession(config.browser) as page:
            document = BrowserDocument(page)
            session = CaptureSession(document, selector=config.selector)
            session.start()
            page.wait_for_timeout(60_000)

    Requires: pip install tggrab[browser]
    """

    def __init__(self, page: Page) -> None:  # type: ignore[no-any-unimported]
        if not PLAYWRIGHT_AVAILABLE:
            raise ImportError(
                "Playwright is required for live capture. Install with: pip install tggrab[browser]"
            )
        self.page = page
        self._subscriptions: list[BrowserSubscription] = []
        self._bound = False

    def select(self, selector: str) -> list[BrowserElement]:
        return [BrowserElement(h) for h in self.page.query_selector_all(selector)]

    def subscribe(self, callback: MutationCallback) -> BrowserSubscription:
        if not self._bound:
            self.page.expose_binding(MUTATION_BINDING, self._on_mutations, handle=True)
            # A reload drops the page-side observer; the binding survives
            self.page.on("domcontentloaded", self._on_navigation)
            self._bound = True
        subscription = BrowserSubscription(self, callback)
        self._subscriptions.append(subscription)
        if len(self._subscriptions) == 1:
            self._install_observer()
        return subscription

    def _install_observer(self) -> None:
        if self.page.evaluate(OBSERVER_SCRIPT, MUTATION_BINDING):
            logger.debug("Page mutation observer installed")

    def _on_navigation(self, page: Any) -> None:
        if not self._subscriptions:
            return
        try:
            self._install_observer()
        except Exception as e:
            logger.warning(f"Could not re-attach mutation observer after navigation: {e}")

    def _detach(self, subscription: BrowserSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
        if not self._subscriptions:
            try:
                self.page.evaluate(DISCONNECT_SCRIPT)
                logger.debug("Page mutation observer disconnected")
            except Exception as e:
                # Page already closed; nothing left to disconnect
                logger.debug(f"Could not disconnect observer: {e}")

    def _on_mutations(self, source: Any, payload: JSHandle) -> None:  # type: ignore[no-any-unimported]
        handles: list[JSHandle] = [payload]  # type: ignore[no-any-unimported]
        nodes: dict[str, JSHandle] = {}  # type: ignore[no-any-unimported]
        added: list[BrowserElement | BrowserNode] = []
        try:
            parts = payload.get_properties()
            handles.extend(parts.values())
            kinds = parts["kinds"].json_value()
            nodes = parts["nodes"].get_properties()
            for index, kind in enumerate(kinds):
                handle = nodes[str(index)]
                element = handle.as_element() if kind == ELEMENT_NODE else None
                if element is not None:
                    added.append(BrowserElement(element))
                else:
                    added.append(BrowserNode())
        except Exception as e:
            logger.warning(f"Could not read mutation batch: {e}")
            for handle in [*handles, *nodes.values()]:
                release(handle)
            return
        # Element handles are released through their wrappers
        handles.extend(nodes[str(i)] for i, node in enumerate(added) if not node.is_element)

        batch = MutationBatch(added_nodes=added)
        try:
            for subscription in list(self._subscriptions):
                if subscription.active:
                    subscription.callback(batch)
        finally:
            for node in added:
                if isinstance(node, BrowserElement):
                    node.dispose()
            for handle in handles:
                release(handle)

    def bind_export_shortcut(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` when Ctrl+Shift+S is pressed in the page."""
        self.page.expose_binding(SHORTCUT_BINDING, lambda source: callback())
        self.page.add_init_script(f"({SHORTCUT_SCRIPT})({SHORTCUT_BINDING!r})")
        self.page.evaluate(SHORTCUT_SCRIPT, SHORTCUT_BINDING)

    def scroll_feed(self, container: Optional[str], message_selector: Optional[str]) -> bool:
        """Scroll the message feed up one screen."""
        try:
            return bool(self.page.evaluate(SCROLL_SCRIPT, [container, message_selector]))
        except Exception as e:
            logger.debug(f"Scroll failed: {e}")
            return False

    def pump(self, milliseconds: float) -> None:
        """Let the page run (and deliver batches) for a while."""
        self.page.wait_for_timeout(milliseconds)


class BrowserSession:
    """
    Opens a browser page for live capture.

    With ``user_data_dir`` set, a persistent profile is used so a logged-in
    chat session survives between runs.

    Example:
        with BrowserSession(BrowserConfig(url="https://web.telegram.org/a/")) as page:
            ...

    Requires: pip install tggrab[browser]
    """

    def __init__(self, config: BrowserConfig) -> None:
        if not PLAYWRIGHT_AVAILABLE:
            raise ImportError(
                "Playwright is required for live capture. Install with: pip install tggrab[browser]"
            )
        self._config = config
        self._playwright: Optional[Playwright] = None  # type: ignore[no-any-unimported]
        self._context: Optional[BrowserContext] = None  # type: ignore[no-any-unimported]

    def __enter__(self) -> Page:  # type: ignore[no-any-unimported]
        config = self._config
        self._playwright = sync_playwright().start()
        chromium = self._playwright.chromium

        if config.user_data_dir is not None:
            Path(config.user_data_dir).mkdir(parents=True, exist_ok=True)
            self._context = chromium.launch_persistent_context(
                str(config.user_data_dir),
                headless=config.headless,
            )
        else:
            browser = chromium.launch(headless=config.headless)
            self._context = browser.new_context()
        self._context.set_default_timeout(config.timeout * 1000)

        page = self._context.pages[0] if self._context.pages else self._context.new_page()
        if config.url:
            page.goto(config.url)
        logger.info(f"Browser ready{f' at {config.url}' if config.url else ''}")
        return page

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            if self._context is not None:
                browser = self._context.browser
                self._context.close()
                if browser is not None:
                    browser.close()
        finally:
            self._context = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None
