# application/services/html_decoder.py
from __future__ import annotations

import re
from typing import Mapping, Optional, Tuple

from bs4 import BeautifulSoup

_CHARSET = re.compile(r"charset\s*=\s*([^\s;]+)", re.I)


def charset_from_headers(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    ctype = (headers or {}).get("Content-Type") or (headers or {}).get("content-type") or ""
    m = _CHARSET.search(ctype)
    if not m:
        return None
    return m.group(1).strip().strip('"').strip("'") or None


def decode_body(raw: Optional[bytes], headers: Optional[Mapping[str, str]], default_encoding: str) -> Tuple[str, str]:
    """
    raw bytes + headers から本文テキストを復元する。
    戻り値: (decoded_text, decided_encoding)
    """
    if not raw:
        return "", default_encoding

    # 1) Content-Type の charset を優先
    enc = charset_from_headers(headers)
    if enc:
        try:
            return raw.decode(enc, errors="replace"), enc
        except LookupError:
            pass

    # 2) ブラウザ既定のエンコーディング
    return raw.decode(default_encoding, errors="replace"), default_encoding


def page_to_document(page: str) -> BeautifulSoup:
    return BeautifulSoup(page, "lxml")
