"""
Logging setup for the case-definition converter.

Records may carry two context attributes, ``stage`` (parse, assemble,
render, write, config) and ``source`` (the input file). They are set either
through ``extra=`` or by a StageLoggerAdapter bound to a stage.

Console output is human-readable by default and prefixes the stage when it
is known; ``--json-log`` switches the console to JSON lines. ``--log-file``
always writes JSON lines.

Usage:
    from core.logging_config import configure_logging, stage_logger

    configure_logging(json_mode=args.json_log, log_file=args.log_file)
    logger = stage_logger(__name__, "assemble")
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

CONTEXT_FIELDS = ("stage", "source")


def _context(record: logging.LogRecord) -> dict:
    return {key: getattr(record, key) for key in CONTEXT_FIELDS if getattr(record, key, "")}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, context attributes included when set."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(_context(record))
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            entry["error"] = {"type": type(exc).__name__, "message": str(exc)}
        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Level-prefixed terminal output, e.g. ``[WARN] [assemble] message``."""

    PREFIXES = {
        logging.DEBUG: "\033[90m[DEBUG]\033[0m",
        logging.INFO: "[INFO]",
        logging.WARNING: "\033[33m[WARN]\033[0m",
        logging.ERROR: "\033[31m[ERROR]\033[0m",
        logging.CRITICAL: "\033[1;31m[CRIT]\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        parts = [self.PREFIXES.get(record.levelno, f"[{record.levelname}]")]
        stage = getattr(record, "stage", "")
        if stage:
            parts.append(f"[{stage}]")
        parts.append(record.getMessage())
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    *,
    json_mode: bool = False,
    log_file: Optional[str] = None,
    level: int = logging.INFO,
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        json_mode: JSON lines on stderr instead of the console format.
        log_file: Also append JSON lines to this file (parent dirs created).
        level: Root and handler level.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JSONFormatter() if json_mode else ConsoleFormatter())
    root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(JSONFormatter())
        root.addHandler(fh)

    for handler in root.handlers:
        handler.setLevel(level)


class StageLoggerAdapter(logging.LoggerAdapter):
    """Adds the bound stage and source to every record unless the call sets them."""

    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        for key in CONTEXT_FIELDS:
            extra.setdefault(key, self.extra.get(key, ""))
        return msg, kwargs


def stage_logger(name: str, stage: str, source: str = "") -> StageLoggerAdapter:
    return StageLoggerAdapter(logging.getLogger(name), {"stage": stage, "source": source})
