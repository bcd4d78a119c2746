"""
Structured logging configuration.
Designed for easy debugging without exposing credentials.
"""
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generator, Optional

import structlog
from structlog.types import Processor

from training_analytics.core.config import settings


def setup_logging() -> None:
    """Configure structured logging for the application."""

    # Common processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        # JSON format for production
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console format for development
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# ========================================
# Upstream (Zoezi) call logging
# ========================================

@dataclass
class UpstreamCallLog:
    """Complete log entry for one logical upstream request."""
    call_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    domain: str = ""
    endpoint: str = ""

    attempts: int = 0
    status_code: Optional[int] = None
    item_count: Optional[int] = None

    start_time: float = 0.0
    end_time: float = 0.0
    duration_ms: float = 0.0

    success: bool = True
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class UpstreamCallLogger:
    """
    Logger for upstream API calls.

    Query strings and headers are never logged, so API keys stay out of
    the log stream.

    Usage:
        call_logger = UpstreamCallLogger(logger)
        with call_logger.track_call("gym.zoezi.se", "/api/site/get/all") as call:
            call.record_attempt(1, status_code=200)
            call.set_result(items)
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger):
        self.logger = logger
        self.debug_enabled = settings.ZOEZI_DEBUG_LOG

    @contextmanager
    def track_call(
        self,
        domain: str,
        endpoint: str,
    ) -> Generator["UpstreamCallTracker", None, None]:
        """Context manager for tracking one upstream request and its retries."""
        tracker = UpstreamCallTracker(
            logger=self.logger,
            debug_enabled=self.debug_enabled,
            domain=domain,
            endpoint=endpoint,
        )
        tracker.start()
        try:
            yield tracker
        except Exception as e:
            tracker.set_error(type(e).__name__, str(e))
            raise
        finally:
            tracker.finish()


class UpstreamCallTracker:
    """Tracker for a single upstream request."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        debug_enabled: bool,
        domain: str,
        endpoint: str,
    ):
        self.logger = logger
        self.debug_enabled = debug_enabled
        self.log = UpstreamCallLog(domain=domain, endpoint=endpoint)

    def start(self) -> None:
        """Mark the start of the call."""
        self.log.start_time = time.time()

        if self.debug_enabled:
            self.logger.debug(
                "Upstream call started",
                call_id=self.log.call_id,
                domain=self.log.domain,
                endpoint=self.log.endpoint,
            )

    def record_attempt(
        self,
        attempt: int,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        """Record one attempt. Failed attempts are always logged."""
        self.log.attempts = attempt
        self.log.status_code = status_code

        if error is not None:
            self.logger.warning(
                "Upstream attempt failed",
                call_id=self.log.call_id,
                endpoint=self.log.endpoint,
                attempt=attempt,
                status_code=status_code,
                error=error,
            )
        elif self.debug_enabled:
            self.logger.debug(
                "Upstream attempt succeeded",
                call_id=self.log.call_id,
                endpoint=self.log.endpoint,
                attempt=attempt,
                status_code=status_code,
            )

    def set_result(self, payload: object) -> None:
        """Set response data."""
        self.log.success = True
        if isinstance(payload, list):
            self.log.item_count = len(payload)

    def set_error(self, error_type: str, error_message: str) -> None:
        """Set error information."""
        self.log.success = False
        self.log.error_type = error_type
        self.log.error_message = error_message

    def finish(self) -> None:
        """Mark the end of the call and log summary."""
        self.log.end_time = time.time()
        self.log.duration_ms = (self.log.end_time - self.log.start_time) * 1000

        if self.log.success:
            self.logger.info(
                "Upstream call completed",
                call_id=self.log.call_id,
                domain=self.log.domain,
                endpoint=self.log.endpoint,
                attempts=self.log.attempts,
                status_code=self.log.status_code,
                item_count=self.log.item_count,
                duration_ms=round(self.log.duration_ms, 2),
            )
        else:
            self.logger.error(
                "Upstream call failed",
                call_id=self.log.call_id,
                domain=self.log.domain,
                endpoint=self.log.endpoint,
                attempts=self.log.attempts,
                duration_ms=round(self.log.duration_ms, 2),
                error_type=self.log.error_type,
                error_message=self.log.error_message,
            )

