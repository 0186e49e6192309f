# application/services/file_attacher.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from application.ports.logger import LoggerPort, NullLogger
from domain.args import Args
from domain.content_types import DEFAULT_FILE_CONTENT_TYPE, detect_image_content_type, source_file_name

Fetcher = Callable[[str], bytes]
FileSources = Mapping[str, Union[str, Iterable[str]]]


def split_sources(value: Union[str, Iterable[str]]) -> List[str]:
    """"a.png,b.png" -> ["a.png", "b.png"]. An empty string is one empty source."""
    if isinstance(value, str):
        return [s.strip() for s in value.split(",")]
    return [str(s).strip() for s in value]


def _is_remote(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


class FileAttacher:
    """
    Append file parts to an Args collection before multipart serialisation.

    Each part carries a `filename` attribute (final path segment of the source)
    and a content type (explicit override, else guessed from the extension).
    Remote sources go through `fetch` so the browser's cookies apply.
    """

    def __init__(
        self,
        fetch: Fetcher,
        fallback_content_type: str = DEFAULT_FILE_CONTENT_TYPE,
        logger: Optional[LoggerPort] = None,
    ):
        self._fetch = fetch
        self._fallback = fallback_content_type
        self._logger = logger or NullLogger()

    def load(self, source: str) -> bytes:
        if not source:
            return b""
        if _is_remote(source):
            return self._fetch(source)
        return Path(source).read_bytes()

    def attach(self, args: Args, files: Optional[FileSources], content_type: str = "") -> Args:
        if not files:
            return args

        attached: Dict[str, List[str]] = {}
        for name, value in files.items():
            for source in split_sources(value):
                ctype = content_type or detect_image_content_type(source, self._fallback)
                args.add(
                    name,
                    self.load(source),
                    additional={"filename": source_file_name(source)},
                    content_type=ctype,
                )
                attached.setdefault(name, []).append(source_file_name(source))

        self._logger.debug("files.attached", files=attached)
        return args
