import asyncio
import json
import logging

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from agent_memory.interfaces import ConfigurationError
from agent_memory.utils import (
    StructuredFormatter,
    float_from_env,
    get_message_text,
    int_from_env,
    load_chat_model,
    log_call,
    setup_logging,
)

logger = logging.getLogger("agent_memory.tests")


def test_structured_formatter_emits_json():
    record = logging.LogRecord("agent_memory.x", logging.INFO, __file__, 1, "stored %s", ("a",), None)
    record.entry_id = "a"
    record.details = {"tier": "cache"}

    data = json.loads(StructuredFormatter().format(record))

    assert data["message"] == "stored a"
    assert data["level"] == "INFO"
    assert data["entry_id"] == "a"
    assert data["details"] == {"tier": "cache"}
    assert "function" not in data


def test_setup_logging_writes_json_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("DEBUG", log_dir=str(tmp_path), log_file_name="test.log")
        logging.getLogger("agent_memory.x").debug("hello", extra={"entry_id": "mem-1"})
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    lines = [json.loads(line) for line in (tmp_path / "test.log").read_text().splitlines()]
    assert lines[-1]["message"] == "hello"
    assert lines[-1]["entry_id"] == "mem-1"


def test_log_call_reraises_and_logs(caplog):
    @log_call(logger)
    async def explode():
        raise KeyError("nope")

    @log_call(logger)
    def add(a, b):
        return a + b

    with caplog.at_level(logging.DEBUG, logger="agent_memory.tests"):
        assert add(1, 2) == 3
        with pytest.raises(KeyError):
            asyncio.run(explode())

    failures = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(failures) == 1
    assert failures[0].function.endswith("explode")
    assert failures[0].exc_info is not None


def test_env_parsing(monkeypatch):
    monkeypatch.setenv("AGENT_MEMORY_TEST_INT", "12")
    monkeypatch.setenv("AGENT_MEMORY_TEST_FLOAT", "0.25")
    monkeypatch.setenv("AGENT_MEMORY_TEST_BLANK", " ")
    monkeypatch.setenv("AGENT_MEMORY_TEST_BAD", "twelve")

    assert int_from_env("AGENT_MEMORY_TEST_INT", 1) == 12
    assert float_from_env("AGENT_MEMORY_TEST_FLOAT", 1.0) == 0.25
    assert int_from_env("AGENT_MEMORY_TEST_BLANK", None) is None
    assert int_from_env("AGENT_MEMORY_TEST_UNSET", 3) == 3
    with pytest.raises(ConfigurationError):
        int_from_env("AGENT_MEMORY_TEST_BAD", 1)
    with pytest.raises(ConfigurationError):
        float_from_env("AGENT_MEMORY_TEST_BAD", 1.0)


def test_load_chat_model_needs_provider():
    with pytest.raises(ConfigurationError):
        load_chat_model("gpt-4o-mini")


def test_get_message_text():
    assert get_message_text(HumanMessage(content="plain")) == "plain"
    assert get_message_text(AIMessage(content=[{"type": "text", "text": "a"}, "b"])) == "ab"
