"""
Centralized Logger with Rich Console
====================================
Console output goes through Rich; file output goes to three JSON-line
streams under LOG_DIR.

Usage:
    from rent_reclaim.shared.system.logging import Logger

    Logger.info("[DISCOVERY] Message")
    Logger.success("[RECLAIM] Account drained", signature=sig)
    Logger.warning("Something concerning")
    Logger.error("Something broke", operation="RECLAIM")
    Logger.section("Starting Cycle")

Streams:
    combined.log            every event
    error.log               ERROR and above
    reclaim-operations.log  records tagged operation=RECLAIM
"""

import os
import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.text import Text

from rent_reclaim.config.settings import Settings

COMBINED_LOG = "combined.log"
ERROR_LOG = "error.log"
RECLAIM_LOG = "reclaim-operations.log"

SERVICE_NAME = "rent-reclaim"

file_logger = logging.getLogger("RentReclaim")
file_logger.setLevel(logging.INFO)
file_logger.propagate = False


# =============================================================================
# SOURCE ICONS (for visual scanning)
# =============================================================================

SOURCE_ICONS = {
    "SYSTEM": "🛸",
    "DISCOVERY": "🔍",
    "EVALUATE": "🧮",
    "RECLAIM": "💸",
    "BATCH": "📦",
    "CYCLE": "🔁",
    "RPC": "📡",
    "SCHEDULER": "⏰",
    "CONFIG": "⚙️",
}

LEVEL_STYLES = {
    "INFO": "cyan",
    "SUCCESS": "green bold",
    "WARNING": "yellow",
    "ERROR": "red bold",
    "DEBUG": "dim",
    "CRITICAL": "red bold reverse",
    "SECTION": "magenta bold",
}

_console = Console(stderr=True)


# =============================================================================
# FILE STREAMS
# =============================================================================

class JsonLineFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, message, plus audit fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "service": SERVICE_NAME,
            "source": getattr(record, "source", "SYSTEM"),
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "fields", None) or {})
        return json.dumps(payload, default=str)


class OperationFilter(logging.Filter):
    """Pass only records whose audit fields carry the given operation."""

    def __init__(self, operation: str):
        super().__init__()
        self.operation = operation

    def filter(self, record: logging.LogRecord) -> bool:
        fields = getattr(record, "fields", None) or {}
        return fields.get("operation") == self.operation


class LevelFilter(logging.Filter):
    """LOG_LEVEL gate for general events; audit records always pass."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        fields = getattr(record, "fields", None) or {}
        return record.levelno >= self.level or "operation" in fields


def _file_handler(path: str, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JsonLineFormatter())
    return handler


def _audit_handler(path: str) -> logging.FileHandler:
    # Append-only: reclaim records are never rotated away
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(JsonLineFormatter())
    handler.addFilter(OperationFilter("RECLAIM"))
    return handler


# =============================================================================
# LOGGER CLASS
# =============================================================================

class Logger:
    """
    Centralized logger with Rich console output.

    Features:
    - Color-coded console output with source icons
    - JSON file streams with rotation
    - Structured fields passed as keyword arguments
    """

    _silent_mode = False
    _configured = False
    _log_dir: Optional[str] = None

    @staticmethod
    def configure(log_dir: Optional[str] = None, level: str = "INFO") -> str:
        """(Re)bind file streams to ``log_dir``. Returns the directory used."""
        log_dir = log_dir or Settings.log_dir()
        os.makedirs(log_dir, exist_ok=True)

        for handler in list(file_logger.handlers):
            file_logger.removeHandler(handler)
            handler.close()

        # Logger itself passes everything; LOG_LEVEL is applied per stream
        file_logger.setLevel(logging.DEBUG)

        combined = _file_handler(os.path.join(log_dir, COMBINED_LOG), logging.DEBUG)
        combined.addFilter(LevelFilter(getattr(logging, level.upper(), logging.INFO)))
        file_logger.addHandler(combined)
        file_logger.addHandler(_file_handler(os.path.join(log_dir, ERROR_LOG), logging.ERROR))
        file_logger.addHandler(_audit_handler(os.path.join(log_dir, RECLAIM_LOG)))

        Logger._configured = True
        Logger._log_dir = log_dir
        return log_dir

    @staticmethod
    def log_dir() -> Optional[str]:
        return Logger._log_dir

    @staticmethod
    def _timestamp() -> str:
        """High-precision timestamp (HH:MM:SS.ms)."""
        now = datetime.now()
        ms = str(now.microsecond)[:3]
        return f"{now.strftime('%H:%M:%S')}.{ms:0<3}"

    @staticmethod
    def _parse_source(message: str) -> tuple:
        """Extract [SOURCE] tag from message if present."""
        stripped = message.strip()
        if stripped.startswith("[") and "]" in stripped:
            tag_end = stripped.index("]")
            source = stripped[1:tag_end].upper()
            clean_msg = stripped[tag_end + 1:].strip()
            if 0 < len(source) < 15:
                return source, clean_msg
        return "SYSTEM", message

    @staticmethod
    def _format_console(level: str, message: str, source: str) -> None:
        if Logger._silent_mode:
            return

        ts = Logger._timestamp()
        icon = SOURCE_ICONS.get(source.upper(), "")
        msg_with_icon = f"{icon} {message}" if icon else message

        style = LEVEL_STYLES.get(level, "white")
        line = Text()
        line.append(f"{ts} ", style="dim")
        line.append(f"| {level[:8].ljust(8)} ", style=style)
        line.append(f"| {source[:10].ljust(10)} | ", style="dim")
        line.append(msg_with_icon)
        _console.print(line)

    @staticmethod
    def _log_to_file(level: int, message: str, source: str, fields: dict) -> None:
        if not Logger._configured:
            Logger.configure()
        file_logger.log(level, message, extra={"source": source, "fields": fields})

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @staticmethod
    def info(message: str, **fields) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("INFO", msg, source)
        Logger._log_to_file(logging.INFO, msg, source, fields)

    @staticmethod
    def success(message: str, **fields) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("SUCCESS", msg, source)
        Logger._log_to_file(logging.INFO, msg, source, fields)

    @staticmethod
    def warning(message: str, **fields) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("WARNING", msg, source)
        Logger._log_to_file(logging.WARNING, msg, source, fields)

    @staticmethod
    def error(message: str, **fields) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("ERROR", msg, source)
        Logger._log_to_file(logging.ERROR, msg, source, fields)

    @staticmethod
    def debug(message: str, **fields) -> None:
        source, msg = Logger._parse_source(message)
        Logger._log_to_file(logging.DEBUG, msg, source, fields)

    @staticmethod
    def critical(message: str, **fields) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("CRITICAL", f"🛑 {msg}", source)
        Logger._log_to_file(logging.CRITICAL, f"🛑 {msg}", source, fields)

    @staticmethod
    def section(title: str) -> None:
        """Print a section header."""
        if not Logger._silent_mode:
            _console.print()
            _console.rule(f"[bold magenta]{title}[/]", style="dim")
        Logger._log_to_file(logging.INFO, f"=== {title} ===", "SYSTEM", {})

    @staticmethod
    def set_silent(silent: bool) -> None:
        """Enable/disable console output."""
        Logger._silent_mode = silent
