"""Core module exports."""

from docmark.core.errors import (
    ConfigError,
    ContractViolation,
    DocmarkError,
    DocumentationError,
    ErrorCode,
    InternalError,
)
from docmark.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ContractViolation",
    "DocmarkError",
    "DocumentationError",
    "ErrorCode",
    "InternalError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
