# application/ports/node_query.py
from __future__ import annotations

from typing import List, Optional, Protocol, Sequence


class NodeQuery(Protocol):
    """
    What the form scraper needs from a parsed document node.

    `select_one` evaluates the adapter's path-query language
    (CSS for BeautifulSoup, XPath for lxml).
    """

    @property
    def tag(self) -> str:
        ...

    @property
    def text(self) -> str:
        ...

    def get(self, attr: str, default: str = "") -> str:
        ...

    def descendants(self, tags: Sequence[str]) -> List["NodeQuery"]:
        ...

    def select_one(self, query: str) -> Optional["NodeQuery"]:
        ...
