from __future__ import annotations

import json

import pytest
from loguru import logger

from infrastructure.logging.loguru_logger import LoguruLogger


@pytest.fixture
def records():
    captured = []
    handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG", format="{message}")
    yield captured
    logger.remove(handler_id)


def test_event_and_fields_reach_loguru(records) -> None:
    LoguruLogger().info("browser.redirect", hop=1, target="http://example.com/next")

    record = records[-1]
    assert record["level"].name == "INFO"
    assert record["extra"]["event"] == "browser.redirect"
    assert record["extra"]["hop"] == 1
    event, payload = record["message"].split(" ", 1)
    assert event == "browser.redirect"
    assert json.loads(payload) == {"hop": 1, "target": "http://example.com/next"}


def test_bound_fields_and_levels(records) -> None:
    log = LoguruLogger().bind(session="s1")

    log.debug("a")
    log.warning("b")
    log.error("c", reason="x")

    assert [r["level"].name for r in records[-3:]] == ["DEBUG", "WARNING", "ERROR"]
    assert all(r["extra"]["session"] == "s1" for r in records[-3:])
    assert records[-1]["extra"]["reason"] == "x"
