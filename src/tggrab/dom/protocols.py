"""Protocol definitions for the document a capture session observes."""

from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Node(Protocol):
    """A node added to the document; only element nodes are considered."""

    @property
    def is_element(self) -> bool:
        """True for element nodes, False for text/comment nodes."""
        ...


@runtime_checkable
class Element(Node, Protocol):
    """
    An element of the observed document.

    Implementations can be backed by:
    - An in-memory parse tree (BeautifulSoup)
    - A live browser element handle (Playwright)
    """

    @property
    def text(self) -> str:
        """Rendered text content. May raise if the element is gone."""
        ...

    def matches(self, selector: str) -> bool:
        """Check whether this element matches a CSS selector."""
        ...

    def select(self, selector: str) -> list["Element"]:
        """Return descendants matching a CSS selector, in document order."""
        ...

    def dispose(self) -> None:
        """Release any host resources held for this element. Idempotent."""
        ...


@dataclass
class MutationBatch:
    """
    Nodes added to the document in one structural change notification.

    Attributes:
        added_nodes: Added nodes in the order the host reported them
    """

    added_nodes: Sequence[Node] = field(default_factory=list)


MutationCallback = Callable[[MutationBatch], None]


class Subscription(Protocol):
    """Cancellable handle for a mutation subscription."""

    @property
    def active(self) -> bool:
        """False once cancelled."""
        ...

    def cancel(self) -> None:
        """
        Stop delivering batches to the callback.

        Idempotent; no batch is delivered after this returns.
        """
        ...


class Document(Protocol):
    """
    Protocol for a document whose content grows over time.

    Example implementation:
        class StaticDocument:
            def select(self, selector):
                return [...]

            def subscribe(self, callback):
                return NullSubscription()
    """

    def select(self, selector: str) -> list[Element]:
        """Return every element matching a CSS selector, in document order."""
        ...

    def subscribe(self, callback: MutationCallback) -> Subscription:
        """
        Receive a MutationBatch for every structural change to the document.

        Args:
            callback: Invoked once per batch, on the host's event thread

        Returns:
            Handle used to cancel the subscription
        """
        ...
