"""
Structured logging for htmlsoups.

Provides JSON-formatted logging with context propagation.
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    log_file: str | None = None,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_type: Output format ('json' or 'console').
        log_file: Optional file path to write logs to.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A bound structured logger.
    """
    return structlog.get_logger(name)


class SoupsLogger:
    """
    Logger with pre-defined event types for fetching, extraction and learning.
    """

    def __init__(self, name: str = "htmlsoups"):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = {}

    def bind(self, **kwargs: Any) -> "SoupsLogger":
        """Bind context to all subsequent log calls."""
        new_logger = SoupsLogger.__new__(SoupsLogger)
        new_logger._logger = self._logger.bind(**kwargs)
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def fetch_start(self, url: str, attempt: int = 1, **kwargs: Any) -> None:
        """Log the start of a fetch attempt."""
        self._logger.info(
            "fetch_start",
            event_type="fetch",
            url=url,
            attempt=attempt,
            **kwargs,
        )

    def fetch_success(
        self,
        url: str,
        status_code: int,
        duration_ms: float,
        content_length: int,
        **kwargs: Any,
    ) -> None:
        """Log a successful fetch."""
        self._logger.info(
            "fetch_success",
            event_type="fetch",
            url=url,
            status_code=status_code,
            duration_ms=duration_ms,
            content_length=content_length,
            **kwargs,
        )

    def fetch_error(
        self,
        url: str,
        error: str,
        error_type: str,
        **kwargs: Any,
    ) -> None:
        """Log a fetch error."""
        self._logger.error(
            "fetch_error",
            event_type="fetch",
            url=url,
            error=error,
            error_type=error_type,
            **kwargs,
        )

    def selector_accepted(
        self,
        selector: str,
        content_type: str,
        domain: str,
        stage: str,
        confidence: float,
        **kwargs: Any,
    ) -> None:
        """Log a selector accepted during replay."""
        self._logger.debug(
            "selector_accepted",
            event_type="learning",
            selector=selector,
            content_type=content_type,
            domain=domain,
            stage=stage,
            confidence=confidence,
            **kwargs,
        )

    def selectors_discovered(
        self,
        content_type: str,
        domain: str,
        selectors: list[str],
        **kwargs: Any,
    ) -> None:
        """Log selectors synthesized from matching elements."""
        self._logger.info(
            "selectors_discovered",
            event_type="learning",
            content_type=content_type,
            domain=domain,
            selectors=selectors,
            count=len(selectors),
            **kwargs,
        )

    def selector_feedback(
        self,
        selector: str,
        content_type: str,
        domain: str,
        success: bool,
        confidence: float,
        **kwargs: Any,
    ) -> None:
        """Log an explicit success/failure report for a selector."""
        self._logger.info(
            "selector_feedback",
            event_type="learning",
            selector=selector,
            content_type=content_type,
            domain=domain,
            success=success,
            confidence=confidence,
            **kwargs,
        )

    def storage_error(
        self,
        operation: str,
        backend: str,
        error: str,
        **kwargs: Any,
    ) -> None:
        """Log a non-fatal persistence failure."""
        self._logger.warning(
            "storage_error",
            event_type="storage",
            operation=operation,
            backend=backend,
            error=error,
            **kwargs,
        )

    def extraction_result(
        self,
        url: str,
        success: bool,
        source: str,
        fields_extracted: list[str],
        **kwargs: Any,
    ) -> None:
        """Log extraction result."""
        level = "info" if success else "warning"
        getattr(self._logger, level)(
            "extraction_result",
            event_type="extraction",
            url=url,
            success=success,
            source=source,
            fields_extracted=fields_extracted,
            **kwargs,
        )

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._logger.error(message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log a critical message."""
        self._logger.critical(message, **kwargs)
