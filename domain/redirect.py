# domain/redirect.py
from __future__ import annotations

from enum import Enum
from typing import Optional

# Found, See Other, Moved Permanently, Temporary Redirect
REDIRECT_STATUSES = frozenset({301, 302, 303, 307})

DEFAULT_SCHEME = "http://"


class RedirectPolicy(str, Enum):
    ONLY_HOST = "only_host"
    ALL_PATH_TRIMMED = "all_path_trimmed"
    NONE = "none"


def _is_absolute(url: str) -> bool:
    return url.startswith("http")


def resolve_redirect(location: str, host: str, request_path: str, policy: RedirectPolicy) -> str:
    """
    Turn a Location header value into an absolute URL.

    host is the Host header of the request that produced the redirect,
    request_path its path. Relative locations are resolved against the
    request "directory" (ALL_PATH_TRIMMED) or the bare host (ONLY_HOST);
    a location starting with "/" is host-relative under both policies.
    """
    target = location
    if not _is_absolute(target):
        if policy == RedirectPolicy.ALL_PATH_TRIMMED and not target.startswith("/"):
            base = host + (request_path or "")
            # "example.com/engine/post.php" -> "example.com/engine"
            if "/" in base:
                base = base[: base.rfind("/")]
        else:
            base = host

        if not target.startswith("/") and not base.endswith("/"):
            target = "/" + target
        elif target.startswith("/") and base.endswith("/"):
            target = target[1:]
        target = base + target

    if not _is_absolute(target):
        target = DEFAULT_SCHEME + target
    return target


def redirect_target(
    status: int,
    location: Optional[str],
    host: str,
    request_path: str,
    policy: RedirectPolicy,
) -> Optional[str]:
    """Next hop for a response, or None when the response does not redirect."""
    if policy == RedirectPolicy.NONE:
        return None
    if status not in REDIRECT_STATUSES:
        return None
    if not location:
        return None
    return resolve_redirect(location, host, request_path, policy)
