"""Config module exports."""

from docmark.config.loader import load_config
from docmark.config.models import (
    DocmarkConfig,
    DocumentationConfig,
    LoggingConfig,
    LogOutputConfig,
    RenderConfig,
)

__all__ = [
    "load_config",
    "DocmarkConfig",
    "DocumentationConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RenderConfig",
]
