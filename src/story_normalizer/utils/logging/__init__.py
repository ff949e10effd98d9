# ABOUTME: Logging configuration and structured logger helpers
# ABOUTME: loguru sinks for files/JSON output, structlog loggers for application code

from .config import (
    LoggingMode,
    configure_logging,
    detect_logging_mode,
    get_logging_status,
    install_quiet_defaults,
)
from .utils import (
    get_logger,
    story_context,
    with_document_context,
    with_operation_context,
)

install_quiet_defaults()

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    "install_quiet_defaults",
    # Utilities
    "get_logger",
    "story_context",
    "with_document_context",
    "with_operation_context",
]
