"""
Structured Logging for QC Buddy.

This module provides a logging infrastructure that supports context fields,
a stage-aware logger for the ingestion pipeline, and consistent formatting
across the application.

Architecture Context
--------------------
Logging is a Core layer service used by every module. Modules import
get_logger() from here rather than using Python's logging directly:

    from qcbuddy.core.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Loaded knowledge", chunks=42)
    # -> "Loaded knowledge | chunks=42"

Logger Types
------------
**StructuredLogger**
    Base logger with structured fields. Keyword arguments passed to a log call
    are rendered as ``key=value`` pairs after the message.

**PipelineLogger**
    Tracks ingestion stages (extract, classify, chunk, write) for one
    document with timing:

        plog = PipelineLogger("menu_sop.docx")
        plog.start_stage("extract")
        plog.finish(success=True, chunks=12)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rich.logging import RichHandler


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True


class StructuredLogger:
    """
    Structured logger with context support.

    Provides consistent logging across the application with
    support for structured fields and context tracking.
    """

    def __init__(self, name: str, config: Optional[LogConfig] = None) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or LogConfig()
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger."""
        level = getattr(logging, self.config.level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # Remove existing handlers
        self.logger.handlers.clear()

        if self.config.console:
            console_handler = RichHandler(
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            console_handler.setLevel(level)
            self.logger.addHandler(console_handler)

        if self.config.file_path:
            formatter = logging.Formatter(
                self.config.format,
                datefmt=self.config.date_format,
            )
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Format message with extra fields."""
        if kwargs:
            field_str = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{message} | {field_str}"
        return message

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(self._format_message(message, **kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message, **kwargs))

    def set_level(self, level: str) -> None:
        """Change the level of the logger and its handlers."""
        numeric = getattr(logging, level.upper(), logging.INFO)
        self.logger.setLevel(numeric)
        for handler in self.logger.handlers:
            handler.setLevel(numeric)


class _ConfigHolder:
    """Holds the default logging configuration."""

    _config: LogConfig = LogConfig()

    @classmethod
    def get_config(cls) -> LogConfig:
        """Get the default config."""
        return cls._config

    @classmethod
    def set_config(cls, config: LogConfig) -> None:
        """Set the default config."""
        cls._config = config


# Module-level logger factory
_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name (typically __name__).
        config: Optional logging configuration. Defaults to the
            configuration set by configure_logging().

    Returns:
        Configured StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, config or _ConfigHolder.get_config())
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure global logging settings.

    Loggers created before this call keep their handlers but pick up
    the new level.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        console: Whether to log to console.
    """
    config = LogConfig(level=level, file_path=log_file, console=console)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _ConfigHolder.set_config(config)

    for logger in _loggers.values():
        logger.set_level(level)


class PipelineLogger:
    """
    Specialized logger for ingestion of a single document.

    Tracks processing stages and provides timing information.
    """

    def __init__(self, document: str) -> None:
        self.document = document
        self.logger = get_logger("qcbuddy.pipeline")
        self._stage_start: Optional[datetime] = None
        self._current_stage: Optional[str] = None

    def start_stage(self, stage: str) -> None:
        """Mark the start of a processing stage."""
        self._finish_current_stage()
        self._current_stage = stage
        self._stage_start = datetime.now()
        self.logger.debug("Starting stage", document=self.document, stage=stage)

    def _finish_current_stage(self) -> None:
        """Log completion of current stage if any."""
        if self._current_stage and self._stage_start:
            duration = (datetime.now() - self._stage_start).total_seconds()
            self.logger.debug(
                "Completed stage",
                document=self.document,
                stage=self._current_stage,
                duration_sec=f"{duration:.2f}",
            )
        self._current_stage = None
        self._stage_start = None

    def finish(
        self, success: bool, chunks: int = 0, error: Optional[str] = None
    ) -> None:
        """Mark pipeline completion."""
        self._finish_current_stage()
        if success:
            self.logger.info(
                "Document ingested",
                document=self.document,
                chunks_created=chunks,
            )
        else:
            self.logger.warning(
                "Skipping document",
                document=self.document,
                error=error,
            )
