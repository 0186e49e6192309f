# domain/exceptions.py
from __future__ import annotations

from typing import Optional


class BrowsingError(Exception):
    """Base class for every failure raised by the browser."""


class InvalidAddressError(BrowsingError):
    pass


class TransportError(BrowsingError):
    """DNS / connection / TLS level failure. Never suppressed."""


class ProtocolError(BrowsingError):
    def __init__(self, status: int, url: str, content: Optional[bytes] = None):
        super().__init__(f"HTTP {status} for {url}")
        self.status = status
        self.url = url
        self.content = content


class TooManyRedirectsError(BrowsingError):
    def __init__(self, url: str, max_redirects: int):
        super().__init__(f"Exceeded {max_redirects} redirects (last target: {url})")
        self.url = url
        self.max_redirects = max_redirects


class RequestCancelledError(BrowsingError):
    pass
