"""Structured logging configuration for rustdoc-mcp."""

import json
import logging
import sys
from typing import Any

# Record attributes copied into JSON output when a caller passes them via `extra`
STRUCTURED_FIELDS = ("item_id", "path", "target", "crate_path")


def setup_logging(
    level: int = logging.INFO,
    json_format: bool = False,
) -> logging.Logger:
    """
    Configure logging for the application.

    Logs go to stderr: the MCP server speaks its protocol on stdout.

    Args:
        level: Logging level (default: INFO)
        json_format: If True, output one JSON object per line

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("rustdoc_mcp")
    logger.setLevel(level)

    # Repeated setup (CLI then server) must not duplicate output
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def level_for_verbosity(verbose: int, quiet: bool = False) -> int:
    """Map CLI -v/-q flags to a logging level."""
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'rustdoc_mcp.')

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"rustdoc_mcp.{name}")
    return logging.getLogger("rustdoc_mcp")
