# tests/application/services/test_cookie_sync.py
from __future__ import annotations

import requests
from requests.cookies import RequestsCookieJar, create_cookie, get_cookie_header

from application.services.cookie_sync import CookieSynchronizer, cookies_for_url

PAST = "Wed, 09 Jun 2021 10:18:14 GMT"
FUTURE = "Fri, 01 Jan 2100 00:00:00 GMT"


def _header_for(jar: RequestsCookieJar, url: str) -> str:
    return get_cookie_header(jar, requests.Request("GET", url).prepare()) or ""


class TestCookieSynchronizer:
    def test_cookie_rehomed_to_request_host(self):
        jar = RequestsCookieJar()

        CookieSynchronizer().sync(jar, ["sid=abc123; Domain=backend.internal"], "http://shop.example.com/")

        assert _header_for(jar, "http://shop.example.com/") == "sid=abc123"
        assert [c.domain for c in jar] == ["shop.example.com"]

    def test_without_override_domain_attribute_is_kept(self):
        jar = RequestsCookieJar()

        CookieSynchronizer(host_override=False).sync(jar, ["sid=abc123; Domain=example.com"], "http://www.example.com/")

        assert [c.domain for c in jar] == [".example.com"]
        assert _header_for(jar, "http://api.example.com/") == "sid=abc123"

    def test_without_override_foreign_domain_rejected(self):
        jar = RequestsCookieJar()

        CookieSynchronizer(host_override=False).sync(jar, ["sid=abc; Domain=other.org"], "http://www.example.com/")

        assert list(jar) == []

    def test_value_with_equals_signs(self):
        jar = RequestsCookieJar()

        CookieSynchronizer().sync(jar, ["token=YWJjZA==; Path=/"], "http://shop.example.com/")

        assert [(c.name, c.value) for c in jar] == [("token", "YWJjZA==")]

    def test_default_path_is_request_directory(self):
        jar = RequestsCookieJar()

        CookieSynchronizer().sync(jar, ["a=1"], "http://example.com/engine/post.php")

        assert [c.path for c in jar] == ["/engine"]

    def test_port_dropped_from_domain(self):
        jar = RequestsCookieJar()

        CookieSynchronizer().sync(jar, ["a=1"], "http://example.com:8080/")

        assert [c.domain for c in jar] == ["example.com"]

    def test_attributes_kept(self):
        jar = RequestsCookieJar()

        CookieSynchronizer().sync(jar, [f"sid=1; Path=/app; Secure; Expires={FUTURE}"], "https://example.com/app/")

        cookie = next(iter(jar))
        assert cookie.path == "/app"
        assert cookie.secure is True
        assert cookie.expires == 4102444800

    def test_max_age_zero_removes_existing(self):
        # Arrange
        jar = RequestsCookieJar()
        jar.set_cookie(create_cookie("sid", "old", domain="example.com", path="/"))

        # Act
        touched = CookieSynchronizer().sync(jar, ["sid=; Max-Age=0; Path=/"], "http://example.com/")

        # Assert
        assert touched == ["sid"]
        assert list(jar) == []

    def test_past_expiry_with_foreign_domain_removes_rehomed_copy(self):
        jar = RequestsCookieJar()
        jar.set_cookie(create_cookie("sid", "old", domain="shop.example.com", path="/"))

        CookieSynchronizer().sync(jar, [f"sid=x; Domain=lb-7.internal; Expires={PAST}"], "http://shop.example.com/")

        assert list(jar) == []

    def test_multiple_lines_merge_with_existing(self):
        jar = RequestsCookieJar()
        jar.set_cookie(create_cookie("keep", "1", domain="example.com", path="/"))

        touched = CookieSynchronizer().sync(jar, ["a=1", "b=2; Path=/"], "http://example.com/")

        assert touched == ["a", "b"]
        assert sorted(c.name for c in jar) == ["a", "b", "keep"]

    def test_nameless_lines_ignored(self):
        jar = RequestsCookieJar()

        touched = CookieSynchronizer().sync(jar, ["", "=x; Path=/"], "http://example.com/")

        assert touched == []
        assert list(jar) == []


class TestCookiesForUrl:
    def test_matches_domain_and_path_longest_path_first(self):
        jar = RequestsCookieJar()
        jar.set_cookie(create_cookie("a", "root", domain="example.com", path="/"))
        jar.set_cookie(create_cookie("a", "app", domain="example.com", path="/app"))
        jar.set_cookie(create_cookie("b", "other", domain="other.org", path="/"))

        found = cookies_for_url(jar, "http://example.com/app/page")

        assert [(c.name, c.value) for c in found] == [("a", "app"), ("a", "root")]

    def test_secure_cookie_only_over_https(self):
        jar = RequestsCookieJar()
        jar.set_cookie(create_cookie("s", "1", domain="example.com", path="/", secure=True))

        assert cookies_for_url(jar, "http://example.com/") == []
        assert [c.name for c in cookies_for_url(jar, "https://example.com/")] == ["s"]
