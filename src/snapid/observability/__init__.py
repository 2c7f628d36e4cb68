"""Public observability primitives: structured logging for the CLI."""

from snapid.observability.logging import (
    DEFAULT_LOGGER_NAME,
    LoggingConfig,
    get_log_context,
    log_context,
    reset_log_context,
    set_log_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "LoggingConfig",
    "get_log_context",
    "log_context",
    "reset_log_context",
    "set_log_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
