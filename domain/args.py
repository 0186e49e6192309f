# domain/args.py
from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

DEFAULT_ENCODING = "windows-1251"

Value = Union[str, bytes]


@dataclass
class Arg:
    """
    One named request value.

    value is always the encoded form of the text under `encoding`;
    `options` holds the alternatives of a <select> (display text -> value).
    """

    name: str
    value: bytes = b""
    content_type: str = ""
    additional: Dict[str, str] = field(default_factory=dict)
    options: Dict[str, str] = field(default_factory=dict)
    encoding: str = DEFAULT_ENCODING

    @classmethod
    def from_text(
        cls,
        name: str,
        text: str,
        encoding: str = DEFAULT_ENCODING,
        additional: Optional[Dict[str, str]] = None,
        content_type: str = "",
    ) -> "Arg":
        return cls(
            name=name,
            value=text.encode(encoding),
            content_type=content_type,
            additional=dict(additional or {}),
            encoding=encoding,
        )

    @property
    def text(self) -> str:
        return self.value.decode(self.encoding, errors="replace")

    def set_value(self, value: Value) -> None:
        if isinstance(value, str):
            self.value = value.encode(self.encoding)
        else:
            self.value = bytes(value)

    def select_option(self, key: str) -> bool:
        if key not in self.options:
            return False
        self.value = self.options[key].encode(self.encoding)
        return True

    def to_string_lines(self) -> List[str]:
        lines = [
            f"Name: {self.name}",
            f'Value: "{self.text}"',
            f"Encoding: {self.encoding}",
        ]
        if self.content_type:
            lines.append(f"Content type: {self.content_type}")
        if self.additional:
            lines.append("Additional:")
            lines.extend(f'\t{k} = "{v}"' for k, v in self.additional.items())
        if self.options:
            lines.append("Options:")
            lines.extend(f'\t{k} = "{v}"' for k, v in self.options.items())
        return lines

    def __str__(self) -> str:
        return "".join(line + "\r\n" for line in self.to_string_lines())


@dataclass
class Args:
    """
    Ordered argument collection.

    Insertion order is the order of multipart parts and of url-encoded pairs.
    Duplicate names are allowed; lookups return the first match.
    """

    items: List[Arg] = field(default_factory=list)
    encoding: str = DEFAULT_ENCODING

    def __iter__(self) -> Iterator[Arg]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Arg:
        return self.items[index]

    def __contains__(self, name: object) -> bool:
        return any(a.name == name for a in self.items)

    def names(self) -> List[str]:
        return [a.name for a in self.items]

    # -------------------------
    # add
    # -------------------------

    def append(self, arg: Arg) -> Arg:
        self.items.append(arg)
        return arg

    def add(
        self,
        name: str,
        value: Value,
        additional: Optional[Dict[str, str]] = None,
        content_type: str = "",
    ) -> Arg:
        if isinstance(value, str):
            arg = Arg.from_text(name, value, self.encoding, additional, content_type)
        else:
            arg = Arg(
                name=name,
                value=bytes(value),
                content_type=content_type,
                additional=dict(additional or {}),
                encoding=self.encoding,
            )
        return self.append(arg)

    # -------------------------
    # lookup / remove
    # -------------------------

    def get(self, name: str) -> Optional[Arg]:
        for a in self.items:
            if a.name == name:
                return a
        return None

    def remove(self, name: str) -> None:
        for i, a in enumerate(self.items):
            if a.name == name:
                del self.items[i]
                return

    def remove_all(self, name: str) -> None:
        self.items = [a for a in self.items if a.name != name]

    def select_radio_value(self, name: str, value: Value) -> Arg:
        """Single-choice fields: drop every existing value, then add one."""
        self.remove_all(name)
        return self.add(name, value)

    def select_option(self, name: str, key: str) -> bool:
        arg = self.get(name)
        if arg is None:
            return False
        return arg.select_option(key)

    # -------------------------
    # export
    # -------------------------

    def _decoded(self, arg: Arg) -> str:
        return html.unescape(arg.value.decode(self.encoding, errors="replace"))

    def to_request_mapping(self) -> Dict[str, str]:
        # 同名キーはカンマ区切りで連結
        result: Dict[str, str] = {}
        for a in self.items:
            text = self._decoded(a)
            if a.name in result:
                result[a.name] = result[a.name] + "," + text
            else:
                result[a.name] = text
        return result

    def to_form_list(self) -> List[Tuple[str, str]]:
        return [(a.name, self._decoded(a)) for a in self.items]

    def to_string_lines(self) -> List[str]:
        lines = [f"Encoding: {self.encoding}", "Arguments:"]
        for a in self.items:
            lines.append("\t======ARG======")
            lines.extend("\t" + s for s in a.to_string_lines())
            lines.append("")
        lines.append("===============")
        return lines

    def __str__(self) -> str:
        return "".join(line + "\r\n" for line in self.to_string_lines())
