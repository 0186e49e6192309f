# application/services/body_builder.py
from __future__ import annotations

import random
import re
import string
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote_plus

from domain.args import DEFAULT_ENCODING, Arg, Args
from domain.content_types import FORM_URLENCODED, MULTIPART_FORM_DATA

BOUNDARY_PREFIX = "----WebKitFormBoundary"
BOUNDARY_RANDOM_LENGTH = 16

# left unescaped besides letters, digits and "_.-"
_URL_SAFE = "!*()"
_PERCENT_ESCAPE = re.compile(r"%[0-9a-fA-F]{2}")

_BOUNDARY_ALPHABET = string.ascii_letters + string.digits


def upper_percent_escapes(text: str) -> str:
    """`%2f` -> `%2F`. Some servers compare escapes case-sensitively."""
    return _PERCENT_ESCAPE.sub(lambda m: m.group(0).upper(), text)


def url_escape(text: str) -> str:
    return upper_percent_escapes(quote_plus(text, safe=_URL_SAFE, encoding="utf-8"))


@dataclass(frozen=True)
class FramedBody:
    data: bytes
    content_type: str
    boundary: Optional[str] = None


class BodyBuilder:
    """
    Serialises an Args collection into a request body.

    - url-encoded: name=value pairs joined by a caller-chosen separator
    - multipart: form-data parts in argument order, random boundary

    The random source is injected so framing is reproducible under test.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING, rng: Optional[random.Random] = None):
        self._encoding = encoding
        self._rng = rng or random.Random()

    def build(
        self,
        args: Args,
        multipart: bool = False,
        separator: str = "&",
        escape: bool = True,
        encoding: Optional[str] = None,
    ) -> FramedBody:
        if multipart:
            return self.multipart(args)
        return self.urlencoded(args, separator=separator, escape=escape, encoding=encoding)

    # -------------------------
    # url-encoded
    # -------------------------

    def urlencoded(
        self, args: Args, separator: str = "&", escape: bool = True, encoding: Optional[str] = None
    ) -> FramedBody:
        """Unescaped bodies are encoded with `encoding`, else the builder's own."""
        pairs: List[str] = []
        for arg in args:
            value = arg.value.decode(args.encoding, errors="replace")
            if escape:
                value = url_escape(value)
            pairs.append(f"{arg.name}={value}")

        body = separator.join(pairs)
        data = body.encode("ascii", errors="replace") if escape else body.encode(encoding or self._encoding)
        return FramedBody(data=data, content_type=FORM_URLENCODED)

    # -------------------------
    # multipart
    # -------------------------

    def random_string(self, length: int) -> str:
        return "".join(self._rng.choice(_BOUNDARY_ALPHABET) for _ in range(length))

    def generate_boundary(self) -> str:
        """i.e. ----WebKitFormBoundaryRO5Sq9bfvDteWBtp"""
        return BOUNDARY_PREFIX + self.random_string(BOUNDARY_RANDOM_LENGTH)

    def multipart(self, args: Args, boundary: Optional[str] = None) -> FramedBody:
        boundary = boundary or self.generate_boundary()
        chunks: List[bytes] = []
        for arg in args:
            chunks.append(self._part_header(arg, boundary))
            chunks.append(arg.value)
            chunks.append(b"\r\n")
        chunks.append(f"--{boundary}--\r\n".encode("ascii"))

        return FramedBody(
            data=b"".join(chunks),
            content_type=f"{MULTIPART_FORM_DATA}; boundary={boundary}",
            boundary=boundary,
        )

    def _part_header(self, arg: Arg, boundary: str) -> bytes:
        extra = "".join(f'; {k}="{v}"' for k, v in arg.additional.items())
        header = f'--{boundary}\r\nContent-Disposition: form-data; name="{arg.name}"{extra}'
        if arg.content_type:
            header += f"\r\nContent-Type: {arg.content_type}"
        header += "\r\n\r\n"
        return header.encode("utf-8")
