# tests/domain/test_content_types.py
from __future__ import annotations

import pytest

from domain.content_types import ContentTypePreset, detect_image_content_type, source_file_name


@pytest.mark.parametrize(
    "source, expected",
    [
        ("photo.bmp", "image/bmp"),
        ("http://cdn.example.com/img/a.GIF", "image/gif"),
        ("a.jpeg", "image/jpeg"),
        ("a.jpg", "image/jpeg"),
        ("dir/a.png", "image/png"),
        ("a.tif", "image/tiff"),
        ("a.tiff", "image/tiff"),
    ],
)
def test_detect_image_content_type(source, expected):
    assert detect_image_content_type(source) == expected


def test_unknown_extension_uses_fallback():
    assert detect_image_content_type("notes.txt") == "image/jpeg"
    assert detect_image_content_type("notes.txt", fallback="application/octet-stream") == "application/octet-stream"


def test_source_file_name():
    assert source_file_name("http://example.com/img/cat.png?size=2") == "cat.png"
    assert source_file_name("C:\\photos\\dog.jpg") == "dog.jpg"
    assert source_file_name("") == ""


def test_presets():
    assert ContentTypePreset.URL_ENCODED.value == "application/x-www-form-urlencoded"
    assert ContentTypePreset.URL_ENCODED_UTF8.value == "application/x-www-form-urlencoded; charset=UTF-8"
    assert ContentTypePreset.TEXT_HTML_UTF8.value == "text/html; charset=UTF-8"
