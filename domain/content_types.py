# domain/content_types.py
from __future__ import annotations

import posixpath
from enum import Enum
from urllib.parse import urlsplit

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"

DEFAULT_FILE_CONTENT_TYPE = "image/jpeg"

IMAGE_CONTENT_TYPES = {
    ".bmp": "image/bmp",
    ".gif": "image/gif",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}


class ContentTypePreset(str, Enum):
    URL_ENCODED = FORM_URLENCODED
    URL_ENCODED_UTF8 = FORM_URLENCODED + "; charset=UTF-8"
    TEXT_HTML_UTF8 = "text/html; charset=UTF-8"


def source_file_name(source: str) -> str:
    """Final path segment of a URL or filesystem path."""
    path = urlsplit(source).path if "://" in source else source
    return posixpath.basename(path.replace("\\", "/"))


def detect_image_content_type(source: str, fallback: str = DEFAULT_FILE_CONTENT_TYPE) -> str:
    _, ext = posixpath.splitext(source_file_name(source))
    return IMAGE_CONTENT_TYPES.get(ext.lower(), fallback)
