# application/services/redactor.py
"""
ログ出力前のマスク処理（フォーム値・ヘッダ・Cookie）
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

MASK = "********"

SENSITIVE_KEYS = {"authorization", "proxy-authorization", "cookie", "set-cookie"}

# ログインフォームの項目名は "user_password" や "csrf_token" のように揺れる
SENSITIVE_FRAGMENTS = ("pass", "token", "secret", "session", "sid")


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    if lowered in SENSITIVE_KEYS:
        return True
    return any(fragment in lowered for fragment in SENSITIVE_FRAGMENTS)


def mask_value(key: str, value: Any) -> Any:
    if value is not None and is_sensitive(key):
        return MASK
    return value


def mask_pairs(pairs: List[Tuple[str, str]]) -> List[Tuple[str, Any]]:
    return [(k, mask_value(k, v)) for k, v in pairs]


def mask_dict(d: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: mask_value(k, v) for k, v in d.items()}


def mask_cookie_values(cookies: Mapping[str, str]) -> Dict[str, str]:
    """Cookie names are safe to log; values never are."""
    return {name: MASK for name in cookies}
