# application/services/cookie_sync.py
"""
Cookie jar access for the browser.

Set-Cookie parsing (quoting, Max-Age, Expires, default path) is left to
http.cookiejar through the jar's make_cookies; this module only decides which
domain a parsed cookie is stored under.
"""
from __future__ import annotations

import time
from http.client import HTTPMessage
from http.cookiejar import Cookie, parse_ns_headers
from typing import Iterable, List, Tuple

import requests
from requests.cookies import MockRequest, MockResponse, RequestsCookieJar, remove_cookie_by_name

from domain.cookies import cookie_domain, request_host


def _mock_request(url: str) -> MockRequest:
    return MockRequest(requests.Request("GET", url).prepare())


def _mock_exchange(url: str, set_cookie_lines: List[str]) -> Tuple[MockResponse, MockRequest]:
    message = HTTPMessage()
    for line in set_cookie_lines:
        # Message.__setitem__ appends; repeated headers stay separate
        message["Set-Cookie"] = line
    return MockResponse(message), _mock_request(url)


def cookies_for_url(jar: RequestsCookieJar, url: str) -> List[Cookie]:
    """Cookies the jar would send to `url`, longest path first (header order)."""
    request = _mock_request(url)
    with jar._cookies_lock:
        # same bookkeeping CookieJar.add_cookie_header does before matching
        jar._policy._now = jar._now = int(time.time())
        cookies = jar._cookies_for_request(request)
    cookies.sort(key=lambda c: len(c.path), reverse=True)
    return cookies


class CookieSynchronizer:
    """
    Merge a response's Set-Cookie directives into the jar.

    With host_override (the default) every cookie is re-homed to the host the
    request was addressed to, whatever Domain the response claimed.
    Without it the jar's policy accepts or rejects the Domain attribute.
    """

    def __init__(self, host_override: bool = True):
        self.host_override = host_override

    @staticmethod
    def _rehome(cookie: Cookie, domain: str) -> None:
        cookie.domain = domain
        cookie.domain_specified = False
        cookie.domain_initial_dot = False

    def sync(self, jar: RequestsCookieJar, set_cookie_lines: Iterable[str], request_url: str) -> List[str]:
        """Returns the cookie names the response addressed, in header order."""
        lines = [line for line in set_cookie_lines if line]
        if not lines:
            return []

        response, request = _mock_exchange(request_url, lines)
        host_domain = cookie_domain(request_host(request_url))

        # expired directives clear the jar here and are not returned
        made = jar.make_cookies(response, request)
        for cookie in made:
            if self.host_override:
                self._rehome(cookie, host_domain)
                jar.set_cookie(cookie)
            else:
                jar.set_cookie_if_ok(cookie, request)

        addressed = [attrs[0][0] for attrs in parse_ns_headers(lines) if attrs]

        if self.host_override:
            # make_cookies cleared under the Domain the response claimed;
            # the live copy sits under the request host
            kept = {c.name for c in made}
            for name in addressed:
                if name not in kept:
                    remove_cookie_by_name(jar, name, domain=host_domain)

        return addressed
