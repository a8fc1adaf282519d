"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DOCMARK__SECTION__KEY)
3. Repo YAML (.docmark/config.yaml)
4. Global YAML (~/.config/docmark/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DOCMARK__<SECTION>__<KEY>=<VALUE>

Examples:
    DOCMARK__LOGGING__LEVEL=DEBUG
    DOCMARK__RENDER__SUMMARY_MAX_LENGTH=80
    DOCMARK__DOCUMENTATION__FAIL_ON_MALFORMED_SOURCE=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DOCMARK__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every index build and cref lookup.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DocumentationConfig(BaseModel):
    """Documentation index configuration.

    Env vars:
        DOCMARK__DOCUMENTATION__FAIL_ON_MALFORMED_SOURCE: Raise instead of
            reporting the unit as undocumented
    """

    fail_on_malformed_source: bool = Field(
        default=False,
        description="Raise DocumentationError when a unit's XML cannot be parsed. "
        "When false the unit is reported as undocumented and the run continues.",
    )
    defer_tag: str = Field(
        default="inheritdoc",
        description="Element marking documentation that must come from an ancestor.",
    )


class RenderConfig(BaseModel):
    """Rendering configuration.

    Env vars:
        DOCMARK__RENDER__SUMMARY_MAX_LENGTH: Table summary truncation budget
        DOCMARK__RENDER__SIGNATURE_MAX_LENGTH: Method signature budget in tables
        DOCMARK__RENDER__CODE_LANGUAGE: Language tag for code blocks
    """

    summary_max_length: int = Field(
        default=100,
        description="Characters kept in table cells and short-summary slots.",
    )
    signature_max_length: int = Field(
        default=25,
        description="Characters kept for method signatures in member tables.",
    )
    code_language: str = Field(
        default="cs",
        description="Language tag attached to code blocks.",
    )
    ignored_method_names: list[str] = Field(
        default_factory=lambda: ["Equals", "ToString", "GetHashCode", "Finalize"],
        description="Methods never listed in generated documents.",
    )
    ignored_attributes: list[str] = Field(
        default_factory=lambda: [
            "IteratorStateMachineAttribute",
            "AsyncStateMachineAttribute",
            "DefaultMemberAttribute",
        ],
        description="Attribute type names not shown as badges.",
    )

    @field_validator("summary_max_length", "signature_max_length")
    @classmethod
    def validate_budget(cls, v: int) -> int:
        if v < 4:
            raise ValueError(f"Truncation budget must be at least 4, got {v}")
        return v


class DocmarkConfig(BaseModel):
    """Root configuration for Docmark.

    All settings can be configured via:
    1. Environment variables: DOCMARK__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    documentation: DocumentationConfig = Field(default_factory=DocumentationConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
