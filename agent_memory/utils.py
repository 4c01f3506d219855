"""Utility & helper functions."""

import os
import json
import logging
import functools
import inspect
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from langchain.chat_models import init_chat_model
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage

from agent_memory.interfaces import ConfigurationError


class StructuredFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    EXTRA_FIELDS = ("function", "entry_id", "details", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(
    log_level: str = "INFO",
    log_dir: str = "logs",
    log_file_name: Optional[str] = None
) -> logging.Logger:
    """Set up logging for an application embedding agent_memory.

    Console output gets INFO and above in a short human format; the log file
    gets everything as structured JSON.

    Args:
        log_level: Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory to store log files
        log_file_name: Optional custom log file name. If None, uses timestamp.

    Returns:
        The configured root logger
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    if log_file_name is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file_name = f"agent_memory_{timestamp}.log"

    log_file_path = log_path / log_file_name

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.handlers.clear()

    file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(StructuredFormatter())
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    logger.addHandler(console_handler)

    logger.info("Logging initialized", extra={
        "details": {"log_file": str(log_file_path), "log_level": log_level}
    })

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


def log_call(logger: logging.Logger):
    """Decorator logging calls, durations and failures of sync or async functions.

    Failures are logged with traceback and re-raised unchanged.
    """
    def decorator(func):
        func_name = func.__qualname__

        def _done(start_time):
            logger.debug(f"{func_name} completed", extra={
                "function": func_name,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            })

        def _failed(start_time):
            logger.error(f"{func_name} failed", extra={
                "function": func_name,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }, exc_info=True)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            logger.debug(f"Calling {func_name}", extra={"function": func_name})
            try:
                result = await func(*args, **kwargs)
            except Exception:
                _failed(start_time)
                raise
            _done(start_time)
            return result

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            logger.debug(f"Calling {func_name}", extra={"function": func_name})
            try:
                result = func(*args, **kwargs)
            except Exception:
                _failed(start_time)
                raise
            _done(start_time)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def int_from_env(name: str, default: Optional[int]) -> Optional[int]:
    """Parse an integer environment variable, returning default when unset."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def float_from_env(name: str, default: float) -> float:
    """Parse a float environment variable, returning default when unset."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}")


def load_chat_model(fully_specified_name: str) -> BaseChatModel:
    """Load a chat model from a fully specified name.

    Args:
        fully_specified_name (str): String in the format 'provider/model'.
    """
    if "/" not in fully_specified_name:
        raise ConfigurationError(
            f"Model name must look like 'provider/model', got {fully_specified_name!r}"
        )
    provider, model = fully_specified_name.split("/", maxsplit=1)
    return init_chat_model(model, model_provider=provider)


def get_message_text(msg: BaseMessage) -> str:
    """Get the text content of a message."""
    content = msg.content
    if isinstance(content, str):
        return content
    elif isinstance(content, dict):
        return content.get("text", "")
    else:
        txts = [c if isinstance(c, str) else (c.get("text") or "") for c in content]
        return "".join(txts).strip()
