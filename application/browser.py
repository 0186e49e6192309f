# application/browser.py
from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

import requests
from requests.exceptions import InvalidURL, MissingSchema
from requests.models import PreparedRequest
from bs4 import BeautifulSoup
from bs4.element import Tag
from requests.cookies import RequestsCookieJar, create_cookie, get_cookie_header
from requests.structures import CaseInsensitiveDict

from application.ports.logger import LoggerPort
from application.ports.node_query import NodeQuery
from application.ports.transport import TransportPort, TransportRequest, TransportResponse
from application.services.body_builder import BodyBuilder, FramedBody
from application.services.cookie_sync import CookieSynchronizer, cookies_for_url
from application.services.file_attacher import FileAttacher, FileSources
from application.services.form_scraper import FormScraper, ScrapedForm
from application.services.html_decoder import decode_body, page_to_document
from application.services.redactor import mask_cookie_values, mask_dict, mask_pairs
from domain.args import Args
from domain.content_types import FORM_URLENCODED, ContentTypePreset
from domain.cookies import cookie_domain, default_cookie_path, header_to_cookies, request_host
from domain.exceptions import (
    InvalidAddressError,
    ProtocolError,
    RequestCancelledError,
    TooManyRedirectsError,
)
from domain.redirect import RedirectPolicy, redirect_target
from domain.settings import BrowserSettings

QueryArgs = Union[Args, Mapping[str, str], List[Tuple[str, str]], None]
Body = Union[bytes, str, None]


@dataclass(frozen=True)
class SendResult:
    """Outcome of one exchange. redirect_target is the next hop, if any."""

    status: int
    url: str
    headers: CaseInsensitiveDict
    content: bytes
    encoding: str
    redirect_target: Optional[str] = None

    @property
    def text(self) -> str:
        return decode_body(self.content, self.headers, self.encoding)[0]


class Browser:
    """
    Scripted browsing session.

    Owns a cookie jar, sends every request with transport-level redirects
    disabled and chases redirects itself so cookies are synchronised at each
    hop. Not safe for concurrent use; share the cookie jar between instances
    instead.
    """

    def __init__(
        self,
        transport: Optional[TransportPort] = None,
        cookie_jar: Optional[RequestsCookieJar] = None,
        *,
        settings: Optional[BrowserSettings] = None,
        logger: Optional[LoggerPort] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or BrowserSettings()

        if transport is None:
            from infrastructure.http.requests_transport import RequestsTransport

            transport = RequestsTransport(verify_tls=self.settings.verify_tls)
        if logger is None:
            from infrastructure.logging.loguru_logger import LoguruLogger

            logger = LoguruLogger()

        self._transport = transport
        self._logger = logger
        self.cookie_jar: RequestsCookieJar = cookie_jar if cookie_jar is not None else RequestsCookieJar()
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()

        self.user_agent = self.settings.user_agent
        self.encoding = self.settings.encoding
        self.timeout = self.settings.timeout_sec
        self.max_redirects = self.settings.max_redirects
        self.redirect_policy = self.settings.redirect_policy
        self.ignore_errors = self.settings.ignore_errors

        self._cookies = CookieSynchronizer(host_override=self.settings.cookie_host_override)
        self._builder = BodyBuilder(encoding=self.encoding, rng=rng)
        self._attacher = FileAttacher(
            fetch=self.download,
            fallback_content_type=self.settings.fallback_file_content_type,
            logger=self._logger,
        )

    @property
    def cookie_host_override(self) -> bool:
        return self._cookies.host_override

    @cookie_host_override.setter
    def cookie_host_override(self, value: bool) -> None:
        self._cookies.host_override = value

    @staticmethod
    def current_timestamp() -> int:
        """Milliseconds since the epoch, as JavaScript's Date.now()."""
        return int(time.time() * 1000)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "Browser":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -------------------------
    # exchange
    # -------------------------

    @staticmethod
    def _prepare_url(url: str, params: QueryArgs = None) -> str:
        if isinstance(params, Args):
            params = params.to_form_list()
        prepared = PreparedRequest()
        try:
            prepared.prepare_url(url, params)
        except (MissingSchema, InvalidURL) as e:
            raise InvalidAddressError(str(e)) from e
        return prepared.url

    def _request_headers(self, has_body: bool, content_type: Optional[str] = None) -> dict:
        headers = {"User-Agent": self.user_agent}
        headers.update(self.headers)
        if has_body:
            if content_type:
                headers["Content-Type"] = content_type
            else:
                headers.setdefault("Content-Type", FORM_URLENCODED)
        else:
            headers.pop("Content-Type", None)
        return headers

    def send(
        self,
        method: str,
        url: str,
        data: Body = None,
        params: QueryArgs = None,
        *,
        timeout: Optional[float] = None,
        content_type: Optional[str] = None,
    ) -> SendResult:
        """
        One request/response exchange; redirects are reported, not followed.

        `content_type` applies to this request only and wins over the header bag.
        """
        full_url = self._prepare_url(url, params)
        parts = urlsplit(full_url)
        host = request_host(full_url)

        body = data.encode(self.encoding) if isinstance(data, str) else data
        headers = self._request_headers(has_body=body is not None, content_type=content_type)

        self._logger.debug(
            "browser.request",
            method=method.upper(),
            url=full_url,
            headers=mask_dict(headers),
            body_len=len(body) if body is not None else 0,
        )

        resp: TransportResponse = self._transport.send(
            TransportRequest(
                method=method.upper(),
                url=full_url,
                headers=headers,
                data=body,
                timeout=self.timeout if timeout is None else timeout,
            ),
            self.cookie_jar,
        )
        resp_headers = CaseInsensitiveDict(resp.headers)

        if resp.status >= 400:
            if not self.ignore_errors:
                raise ProtocolError(resp.status, full_url, resp.content)
            self._logger.warning("browser.protocol_error_ignored", status=resp.status, url=full_url)

        target = redirect_target(
            resp.status,
            resp_headers.get("Location"),
            host,
            parts.path,
            self.redirect_policy,
        )

        synced = self._cookies.sync(self.cookie_jar, resp.set_cookies, full_url)
        if synced:
            self._logger.debug("browser.cookies_synced", host=host, names=synced)

        self._logger.info(
            "browser.response",
            status=resp.status,
            url=full_url,
            body_len=len(resp.content),
            location=resp_headers.get("Location"),
            redirect_target=target,
        )

        return SendResult(
            status=resp.status,
            url=full_url,
            headers=resp_headers,
            content=resp.content,
            encoding=self.encoding,
            redirect_target=target,
        )

    def request(
        self,
        method: str,
        url: str,
        data: Body = None,
        params: QueryArgs = None,
        *,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        content_type: Optional[str] = None,
    ) -> SendResult:
        """
        Send, then follow redirects with GET until a response does not redirect.

        Raises TooManyRedirectsError after `max_redirects` hops and
        RequestCancelledError once `cancel` is set.
        """
        self._check_cancel(cancel, url)
        result = self.send(method, url, data, params, timeout=timeout, content_type=content_type)

        hops = 0
        while result.redirect_target:
            self._check_cancel(cancel, result.redirect_target)
            hops += 1
            if hops > self.max_redirects:
                raise TooManyRedirectsError(result.redirect_target, self.max_redirects)

            self._logger.info("browser.redirect", hop=hops, status=result.status, target=result.redirect_target)
            result = self.send("GET", result.redirect_target, timeout=timeout)

        return result

    @staticmethod
    def _check_cancel(cancel: Optional[threading.Event], url: str) -> None:
        if cancel is not None and cancel.is_set():
            raise RequestCancelledError(f"Request to {url} cancelled")

    # -------------------------
    # navigate
    # -------------------------

    def navigate_raw(self, url: str, args: QueryArgs = None, **kwargs) -> str:
        return self.request("GET", url, params=args, **kwargs).text

    def navigate(self, url: str, args: QueryArgs = None, **kwargs) -> BeautifulSoup:
        return page_to_document(self.navigate_raw(url, args, **kwargs))

    def download(self, url: str) -> bytes:
        return self.request("GET", url).content

    # -------------------------
    # post
    # -------------------------

    def post_raw(self, url: str, data: Body, **kwargs) -> str:
        return self.request("POST", url, data=data if data is not None else b"", **kwargs).text

    def post(self, url: str, data: Body, **kwargs) -> BeautifulSoup:
        return page_to_document(self.post_raw(url, data, **kwargs))

    def build_body(
        self,
        args: Args,
        multipart: bool = False,
        separator: str = "&",
        escape: bool = True,
    ) -> FramedBody:
        """
        Serialise `args` with the current `encoding`.

        The returned content_type is meant for this one body; the header bag is
        left alone. A url-encoded preset on the bag (e.g. with a charset) is
        reused for url-encoded bodies.
        """
        framed = self._builder.build(
            args, multipart=multipart, separator=separator, escape=escape, encoding=self.encoding
        )

        preset = self.headers.get("Content-Type", "")
        if not multipart and preset.startswith(FORM_URLENCODED):
            framed = replace(framed, content_type=preset)

        self._logger.debug(
            "browser.body_built",
            content_type=framed.content_type,
            form=mask_pairs(args.to_form_list()) if not multipart else args.names(),
            body_len=len(framed.data),
        )
        return framed

    def post_args_raw(
        self,
        url: str,
        args: Args,
        *,
        multipart: bool = False,
        separator: str = "&",
        escape: bool = True,
        files: Optional[FileSources] = None,
        file_content_type: str = "",
        **kwargs,
    ) -> str:
        """
        Post an argument set. File parts listed in `files` are appended to
        `args` first (the collection is mutated).
        """
        if files:
            self._attacher.attach(args, files, content_type=file_content_type)
        framed = self.build_body(args, multipart=multipart, separator=separator, escape=escape)
        return self.post_raw(url, framed.data, content_type=framed.content_type, **kwargs)

    def post_args(self, url: str, args: Args, **kwargs) -> BeautifulSoup:
        return page_to_document(self.post_args_raw(url, args, **kwargs))

    def set_content_type(self, content_type: Union[str, ContentTypePreset]) -> None:
        if isinstance(content_type, ContentTypePreset):
            content_type = content_type.value
        self.headers["Content-Type"] = content_type

    # -------------------------
    # forms
    # -------------------------

    def _scraper(self) -> FormScraper:
        return FormScraper(encoding=self.encoding, logger=self._logger)

    def extract_fields(
        self,
        source: Union[BeautifulSoup, Tag, NodeQuery],
        query: Optional[str] = None,
    ) -> Optional[ScrapedForm]:
        """
        Scrape a form. `source` is the form node itself, or (with `query`)
        a document/node to search. Returns None when `query` matches nothing.
        """
        if isinstance(source, Tag):
            from infrastructure.html.soup_node import SoupNode

            source = SoupNode(source)

        scraper = self._scraper()
        if query is None:
            return scraper.extract_fields(source)
        return scraper.find_form(source, query)

    # -------------------------
    # cookies
    # -------------------------

    def get_cookie_header(self, url: str) -> str:
        prepared = requests.Request("GET", self._prepare_url(url)).prepare()
        return get_cookie_header(self.cookie_jar, prepared) or ""

    def cookies_for(self, url: str) -> Dict[str, str]:
        """name -> value of the cookies the jar would send to `url`."""
        found: Dict[str, str] = {}
        for cookie in cookies_for_url(self.cookie_jar, self._prepare_url(url)):
            found.setdefault(cookie.name, cookie.value or "")
        return found

    def get_cookie_value(self, url: str, name: str) -> str:
        return self.cookies_for(url).get(name, "")

    def _set_host_cookies(self, url: str, cookies: Mapping[str, str]) -> None:
        parts = urlsplit(self._prepare_url(url))
        domain = cookie_domain(request_host(url))
        path = default_cookie_path(parts.path)
        for name, value in cookies.items():
            self.cookie_jar.set_cookie(create_cookie(name, value, domain=domain, path=path))

    def _rebuild_host_cookies(self, url: str, cookies: Mapping[str, str]) -> None:
        """
        Replace every cookie that applies to `url` with `cookies`.
        Cookies belonging to other hosts are kept.
        """
        for cookie in cookies_for_url(self.cookie_jar, self._prepare_url(url)):
            self.cookie_jar.clear(cookie.domain, cookie.path, cookie.name)
        self._set_host_cookies(url, cookies)
        self._logger.debug(
            "browser.cookies_rebuilt",
            url=url,
            cookies=mask_cookie_values(dict(cookies)),
        )

    def add_cookie(self, url: str, name: str, value: str) -> None:
        cookies = header_to_cookies(self.get_cookie_header(url))
        cookies[name] = value
        self._rebuild_host_cookies(url, cookies)

    def delete_cookie(self, url: str, name: str) -> None:
        cookies = header_to_cookies(self.get_cookie_header(url))
        cookies.pop(name, None)
        self._rebuild_host_cookies(url, cookies)

    def match_cookies(self, source_url: str, dest_url: str) -> None:
        """Copy the cookie header computed for `source_url` onto `dest_url`'s host."""
        self._set_host_cookies(dest_url, header_to_cookies(self.get_cookie_header(source_url)))
