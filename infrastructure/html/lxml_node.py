# infrastructure/html/lxml_node.py
from __future__ import annotations

from typing import List, Optional, Sequence, Union

import lxml.html
from lxml.html import HtmlElement


class LxmlNode:
    """NodeQuery over an lxml element. Path queries are XPath expressions."""

    def __init__(self, element: HtmlElement):
        self._el = element

    @classmethod
    def from_html(cls, html: Union[str, bytes]) -> "LxmlNode":
        return cls(lxml.html.document_fromstring(html))

    @property
    def element(self) -> HtmlElement:
        return self._el

    @property
    def tag(self) -> str:
        return str(self._el.tag)

    @property
    def text(self) -> str:
        return self._el.text_content()

    def get(self, attr: str, default: str = "") -> str:
        return self._el.get(attr, default)

    def descendants(self, tags: Sequence[str]) -> List["LxmlNode"]:
        return [LxmlNode(e) for e in self._el.iterdescendants(*tags)]

    def select_one(self, query: str) -> Optional["LxmlNode"]:
        for hit in self._el.xpath(query):
            # xpath can also yield strings / attribute values
            if isinstance(hit, HtmlElement):
                return LxmlNode(hit)
        return None
