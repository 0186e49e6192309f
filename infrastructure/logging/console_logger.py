# infrastructure/logging/console_logger.py
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TextIO

from application.ports.logger import LoggerPort

LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


@dataclass(frozen=True)
class ConsoleLogger(LoggerPort):
    """
    One `<event> <json>` line per event. Used by scripts/browse.py --json-log.

    Events below `min_level` are dropped.
    """

    bound: Dict[str, Any] = field(default_factory=dict)
    min_level: str = "debug"
    stream: Optional[TextIO] = None

    def bind(self, **fields: Any) -> "ConsoleLogger":
        return ConsoleLogger(bound={**self.bound, **fields}, min_level=self.min_level, stream=self.stream)

    def debug(self, event: str, **fields: Any) -> None:
        self._write("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._write("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._write("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._write("error", event, fields)

    def _write(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        if LEVELS[level] < LEVELS.get(self.min_level.lower(), 10):
            return
        record = {"type": event, "level": level, **self.bound, **fields}
        # stream は呼び出し時に解決する（capsys 等の差し替えに追従）
        out = self.stream or sys.stdout
        out.write(f"{event} {json.dumps(record, ensure_ascii=False, default=str)}\n")
