"""
Logging for the GraphQL MCP server.

• stdout belongs to the MCP stdio transport, so the console handler writes to stderr.
• A daily rotating file (14 days kept) receives one JSON object per record.
• Extra metadata is passed as `extra={"meta": {...}}` and lands in both outputs.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from typing import Any, Dict

import orjson

from .config import GraphQLConfig, SERVICE_NAME

LOGGER_NAME = "mcp_graphql"
LOG_FILE = "graphql-mcp.log"
BACKUP_DAYS = 14

_MARKER = "_mcp_graphql_handler"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "service": SERVICE_NAME,
        }
        meta = getattr(record, "meta", None)
        if meta:
            payload["meta"] = meta
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


class ConsoleFormatter(logging.Formatter):
    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        meta = getattr(record, "meta", None)
        if meta:
            line = f"{line} {orjson.dumps(meta, default=str, option=orjson.OPT_INDENT_2).decode('utf-8')}"
        return line


def _level(name: str) -> int:
    level = logging.getLevelName((name or "info").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(cfg: GraphQLConfig) -> logging.Logger:
    """Attach file (+ console outside production) handlers. Safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level(cfg.log_level))

    for h in list(logger.handlers):
        if getattr(h, _MARKER, False):
            logger.removeHandler(h)
            h.close()

    os.makedirs(cfg.log_dir, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        os.path.join(cfg.log_dir, LOG_FILE),
        when="midnight",
        backupCount=BACKUP_DAYS,
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    setattr(file_handler, _MARKER, True)
    logger.addHandler(file_handler)

    if not cfg.is_production:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ConsoleFormatter())
        setattr(console, _MARKER, True)
        logger.addHandler(console)

    logger.propagate = False
    return logger
