# domain/cookies.py
from __future__ import annotations

from typing import Dict, Mapping
from urllib.parse import urlsplit


def header_to_cookies(header: str) -> Dict[str, str]:
    """
    Parse a `Cookie:` header value into name -> value.

    Each item is split on its first `=`, so values may contain `=` (base64
    tokens). Items without `=` or with an empty name are skipped; the first
    occurrence of a name wins.
    """
    result: Dict[str, str] = {}
    for item in (header or "").split(";"):
        name, sep, value = item.strip().partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        result.setdefault(name, value.strip())
    return result


def cookies_to_header(cookies: Mapping[str, str]) -> str:
    return "; ".join(f"{k}={v}" for k, v in cookies.items())


def request_host(url: str) -> str:
    # Host header form: host[:port], no userinfo
    return urlsplit(url).netloc.rsplit("@", 1)[-1]


def default_cookie_path(request_path: str) -> str:
    # RFC 6265 5.1.4
    if not request_path or not request_path.startswith("/"):
        return "/"
    if request_path.count("/") == 1:
        return "/"
    return request_path[: request_path.rfind("/")]


def cookie_domain(host: str) -> str:
    """
    Domain to store a host-only cookie under.

    Drops the port; http.cookiejar keys dot-less hosts (localhost) as `<host>.local`.
    """
    hostname = (host or "").strip().lower()
    if hostname.startswith("["):
        # IPv6 literal
        return hostname[: hostname.find("]") + 1]
    hostname = hostname.split(":", 1)[0]
    if hostname and "." not in hostname:
        return hostname + ".local"
    return hostname
