# domain/settings.py
from __future__ import annotations

from dataclasses import dataclass

from domain.args import DEFAULT_ENCODING
from domain.content_types import DEFAULT_FILE_CONTENT_TYPE
from domain.redirect import RedirectPolicy

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1) AppleWebKit/535.1 (KHTML, like Gecko) "
    "Chrome/14.0.835.163 Safari/535.1"
)


@dataclass(frozen=True)
class BrowserSettings:
    user_agent: str = DEFAULT_USER_AGENT
    encoding: str = DEFAULT_ENCODING
    timeout_sec: float = 20.0
    max_redirects: int = 20
    redirect_policy: RedirectPolicy = RedirectPolicy.ALL_PATH_TRIMMED
    ignore_errors: bool = False
    # accept any certificate unless told otherwise
    verify_tls: bool = False
    cookie_host_override: bool = True
    fallback_file_content_type: str = DEFAULT_FILE_CONTENT_TYPE
    log_level: str = "INFO"
