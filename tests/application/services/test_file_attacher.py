# tests/application/services/test_file_attacher.py
from __future__ import annotations

from pathlib import Path
from typing import List

from application.services.file_attacher import FileAttacher, split_sources
from domain.args import Args

FIXTURES = Path(__file__).parents[2] / "fixtures"


class RecordingFetcher:
    def __init__(self, payload: bytes = b"remote-bytes"):
        self.payload = payload
        self.urls: List[str] = []

    def __call__(self, url: str) -> bytes:
        self.urls.append(url)
        return self.payload


def test_split_sources():
    assert split_sources("a.png, b.gif") == ["a.png", "b.gif"]
    assert split_sources("") == [""]
    assert split_sources(["x.png", "y.png"]) == ["x.png", "y.png"]


def test_remote_sources_are_fetched():
    fetch = RecordingFetcher()
    args = Args()

    FileAttacher(fetch).attach(args, {"photo": "http://cdn.example.com/img/cat.png,https://cdn.example.com/dog.gif"})

    assert fetch.urls == ["http://cdn.example.com/img/cat.png", "https://cdn.example.com/dog.gif"]
    assert [a.additional["filename"] for a in args] == ["cat.png", "dog.gif"]
    assert [a.content_type for a in args] == ["image/png", "image/gif"]
    assert all(a.value == b"remote-bytes" for a in args)
    assert args.names() == ["photo", "photo"]


def test_local_source_read_from_disk():
    fetch = RecordingFetcher()
    args = Args()
    source = str(FIXTURES / "upload.png")

    FileAttacher(fetch).attach(args, {"photo": source})

    assert fetch.urls == []
    assert args[0].value == (FIXTURES / "upload.png").read_bytes()
    assert args[0].additional == {"filename": "upload.png"}


def test_empty_source_gives_empty_payload():
    fetch = RecordingFetcher()
    args = Args()

    FileAttacher(fetch).attach(args, {"avatar": ""})

    assert fetch.urls == []
    assert args[0].value == b""
    assert args[0].additional == {"filename": ""}
    assert args[0].content_type == "image/jpeg"


def test_explicit_content_type_overrides_detection():
    args = Args()

    FileAttacher(RecordingFetcher()).attach(
        args,
        {"doc": "http://example.com/a.png"},
        content_type="application/octet-stream",
    )

    assert args[0].content_type == "application/octet-stream"


def test_content_type_detected_per_file():
    args = Args()

    FileAttacher(RecordingFetcher(), fallback_content_type="application/octet-stream").attach(
        args,
        {"files": "http://example.com/a.bmp,http://example.com/b.txt"},
    )

    assert [a.content_type for a in args] == ["image/bmp", "application/octet-stream"]


def test_parts_appended_after_existing_args():
    args = Args()
    args.add("title", "hi")

    FileAttacher(RecordingFetcher()).attach(args, {"photo": "http://example.com/a.png"})

    assert args.names() == ["title", "photo"]


def test_no_files_is_noop():
    args = Args()

    assert FileAttacher(RecordingFetcher()).attach(args, None) is args
    assert len(args) == 0
