"""
Structured Logging

Every log line is JSON with consistent, queryable fields:
  ts, level, module, action, msg, plus any context passed as kwargs.

USAGE
=====
from modelbridge.utils.logging import log, get_logger, configure_logging

logger = get_logger()
log.info(logger, "llm.retry", "attempt_done", "Generation succeeded",
         client="ollama:mistral", attempt=2)

log.error(logger, "llm.parser", "format_failed", "Failed to parse JSON response",
          error=str(e), raw=raw[:200])

The library never configures handlers on import. Applications (and the
scripts/ directory) call configure_logging() once at startup.

ACTION NAMING
=============
Consistent suffixes for queryable actions:
  *_start      beginning of an operation
  *_done       successful completion
  *_failed     error/failure
  *_skipped    intentionally skipped
  *_exhausted  retry budget used up
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

LOGGER_NAME = "modelbridge"

# Dependencies that log every request at INFO/DEBUG
QUIET_LOGGERS = (
    "langchain_core",
    "langchain_openai",
    "langchain_anthropic",
    "openai",
    "anthropic",
    "httpx",
    "httpcore",
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class StructuredFormatter(logging.Formatter):
    """JSON formatter. Falls back to a wrapped record for third-party logs."""

    def __init__(self, pretty: bool = False):
        super().__init__()
        self.pretty = pretty

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()

        # Structured log (emitted via StructuredLogger)
        if getattr(record, "_structured", False):
            data = {
                "ts": _timestamp(),
                "level": record.levelname,
                "module": record._module,
                "action": record._action,
                "msg": msg,
            }
            for key, value in record._extra.items():
                if value is not None:
                    data[key] = value

            if self.pretty:
                return self._pretty(data)
            return json.dumps(data, default=str, separators=(",", ":"))

        # Third-party log (httpx, langchain, ...)
        if self.pretty:
            return msg
        return json.dumps(
            {
                "ts": _timestamp(),
                "level": record.levelname,
                "module": record.name,
                "action": "log",
                "msg": msg,
            },
            default=str,
            separators=(",", ":"),
        )

    def _pretty(self, data: dict) -> str:
        """Human-readable format for development."""
        ts = data["ts"][11:23]  # HH:MM:SS.mmm
        lvl = data["level"][0]  # I/W/E/D
        mod = data["module"].upper()[:12].ljust(12)
        act = data["action"]
        msg = data["msg"]

        skip = {"ts", "level", "module", "action", "msg"}
        ctx = " ".join(f"{k}={v}" for k, v in data.items() if k not in skip)

        return f"{ts} {lvl} [{mod}] {act}: {msg}" + (f" | {ctx}" if ctx else "")


class StructuredLogger:
    """
    Centralized structured logging.

    All methods accept a stdlib logging.Logger, module name, action name,
    message, and arbitrary context fields. Context fields set to None are
    dropped.
    """

    def _log(
        self,
        logger: logging.Logger,
        level: int,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Emit a structured log."""
        extra = {
            "_structured": True,
            "_module": module,
            "_action": action,
            "_extra": {k: v for k, v in kwargs.items() if v is not None},
        }
        logger.log(level, msg, extra=extra)

    def info(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Log INFO level."""
        self._log(logger, logging.INFO, module, action, msg, **kwargs)

    def warning(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Log WARNING level."""
        self._log(logger, logging.WARNING, module, action, msg, **kwargs)

    def error(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs,
    ) -> None:
        """Log ERROR level."""
        self._log(
            logger, logging.ERROR, module, action, msg,
            error=error, error_type=error_type, **kwargs,
        )

    def debug(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Log DEBUG level."""
        self._log(logger, logging.DEBUG, module, action, msg, **kwargs)


# Singleton instance, import this everywhere
log = StructuredLogger()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the library logger, or a child of it."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


def configure_logging() -> None:
    """Configure root logger with structured formatter. Call once at startup.

    Reads from environment:
      LOG_FORMAT: "json" (default) or "pretty" (for development)
      LOG_LEVEL: "INFO" (default), "DEBUG", "WARNING", "ERROR"
    """
    pretty = os.environ.get("LOG_FORMAT", "json") == "pretty"
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(pretty=pretty))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
