# infrastructure/html/soup_node.py
from __future__ import annotations

from typing import List, Optional, Sequence, Union

from bs4 import BeautifulSoup
from bs4.element import Tag


class SoupNode:
    """NodeQuery over a BeautifulSoup tag. Path queries are CSS selectors."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @classmethod
    def from_html(cls, html: Union[str, bytes], parser: str = "lxml") -> "SoupNode":
        return cls(BeautifulSoup(html, parser))

    @property
    def element(self) -> Tag:
        return self._tag

    @property
    def tag(self) -> str:
        return self._tag.name

    @property
    def text(self) -> str:
        return self._tag.get_text()

    def get(self, attr: str, default: str = "") -> str:
        value = self._tag.get(attr)
        if value is None:
            return default
        # multi-valued attributes (class, rel, ...) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def descendants(self, tags: Sequence[str]) -> List["SoupNode"]:
        return [SoupNode(t) for t in self._tag.find_all(list(tags))]

    def select_one(self, query: str) -> Optional["SoupNode"]:
        found = self._tag.select_one(query)
        return SoupNode(found) if found is not None else None
