# application/ports/transport.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from requests.cookies import RequestsCookieJar


@dataclass(frozen=True)
class TransportRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    data: Optional[bytes] = None
    timeout: Optional[float] = None


@dataclass(frozen=True)
class TransportResponse:
    status: int
    url: str
    headers: Dict[str, str]
    content: bytes
    # one entry per Set-Cookie header line, unparsed
    set_cookies: List[str] = field(default_factory=list)


class TransportPort(ABC):
    """
    Performs exactly one HTTP exchange.

    Implementations must not follow redirects and must not raise for
    HTTP error statuses; the browser decides what a status means.
    Address problems raise InvalidAddressError, everything else that keeps a
    response from arriving raises TransportError.
    """

    @abstractmethod
    def send(self, request: TransportRequest, cookie_jar: RequestsCookieJar) -> TransportResponse:
        ...

    def close(self) -> None:
        return None
