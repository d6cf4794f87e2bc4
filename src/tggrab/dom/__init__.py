"""Documents a capture session can observe."""

from .protocols import Document, Element, MutationBatch, MutationCallback, Node, Subscription
from .soup import HtmlDocument, SoupElement, SoupNode

__all__ = [
    # Protocols
    "Document",
    "Element",
    "MutationBatch",
    "MutationCallback",
    "Node",
    "Subscription",
    # BeautifulSoup host
    "HtmlDocument",
    "SoupElement",
    "SoupNode",
]
