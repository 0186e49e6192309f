# infrastructure/http/requests_transport.py
from __future__ import annotations

from typing import List, Optional

import requests
import urllib3
from requests.cookies import RequestsCookieJar
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema, RequestException

from application.ports.transport import TransportPort, TransportRequest, TransportResponse
from domain.exceptions import InvalidAddressError, TransportError


def _set_cookie_lines(resp: requests.Response) -> List[str]:
    # requests folds repeated Set-Cookie headers into one comma-joined value;
    # the raw urllib3 headers still have them one per line
    raw_headers = getattr(resp.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return list(raw_headers.getlist("Set-Cookie"))
    value = resp.headers.get("Set-Cookie")
    return [value] if value else []


class RequestsTransport(TransportPort):
    """
    TransportPort on top of a requests.Session.

    - automatic redirects off
    - the browser's cookie jar is attached to every request; the session's
      own jar is emptied after each exchange so it never leaks into the next
    - TLS verification off unless verify_tls=True
    """

    def __init__(self, session: Optional[requests.Session] = None, verify_tls: bool = False):
        self._session = session or requests.Session()
        self._verify = verify_tls
        if not verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def send(self, request: TransportRequest, cookie_jar: RequestsCookieJar) -> TransportResponse:
        try:
            prepared = self._session.prepare_request(
                requests.Request(
                    method=request.method,
                    url=request.url,
                    headers=request.headers,
                    data=request.data,
                    cookies=cookie_jar,
                )
            )
            resp = self._session.send(
                prepared,
                allow_redirects=False,
                timeout=request.timeout,
                verify=self._verify,
            )
        except (MissingSchema, InvalidSchema, InvalidURL) as e:
            raise InvalidAddressError(f"{request.url}: {e}") from e
        except RequestException as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e
        finally:
            self._session.cookies.clear()

        return TransportResponse(
            status=resp.status_code,
            url=str(resp.url),
            headers=dict(resp.headers),
            content=resp.content,
            set_cookies=_set_cookie_lines(resp),
        )

    def close(self) -> None:
        self._session.close()
