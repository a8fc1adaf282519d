"""Docmark error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Documentation
- 9xxx: Internal

Missing documentation is never an error. Only structurally invalid input
(unsupported symbol kinds, unparsable documentation sources, bad config)
is raised.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Documentation (3xxx)
    DOCUMENTATION_UNAVAILABLE = 3001
    DOCUMENTATION_MALFORMED = 3002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    CONTRACT_VIOLATION = 9101


@dataclass(frozen=True, slots=True)
class DocmarkError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DocmarkError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class DocumentationError(DocmarkError):
    """Errors raised while building a unit's documentation index.

    Fatal for the affected metadata unit only.
    """

    @classmethod
    def malformed_source(cls, unit: str, reason: str) -> "DocumentationError":
        return cls(
            code=ErrorCode.DOCUMENTATION_MALFORMED,
            message=f"Documentation source for '{unit}' is malformed: {reason}",
            details={"unit": unit, "reason": reason},
        )

    @classmethod
    def unavailable(cls, unit: str, reason: str) -> "DocumentationError":
        return cls(
            code=ErrorCode.DOCUMENTATION_UNAVAILABLE,
            message=f"Documentation source for '{unit}' could not be read: {reason}",
            details={"unit": unit, "reason": reason},
        )


class ContractViolation(DocmarkError):
    """A caller handed the core something it never supports. Not retried."""

    @classmethod
    def unsupported_kind(cls, kind: Any) -> "ContractViolation":
        return cls(
            code=ErrorCode.CONTRACT_VIOLATION,
            message=f"Unsupported symbol kind: {kind!r}",
            details={"kind": str(kind)},
        )

    @classmethod
    def unsupported_shape(cls, shape: Any) -> "ContractViolation":
        return cls(
            code=ErrorCode.CONTRACT_VIOLATION,
            message=f"Unsupported type shape: {shape!r}",
            details={"shape": str(shape)},
        )

    @classmethod
    def detached_member(cls, name: str) -> "ContractViolation":
        return cls(
            code=ErrorCode.CONTRACT_VIOLATION,
            message=f"Member '{name}' is not attached to a declaring type",
            details={"member": name},
        )

    @classmethod
    def mixed_member_group(cls, name: str, owners: list[str]) -> "ContractViolation":
        return cls(
            code=ErrorCode.CONTRACT_VIOLATION,
            message=f"Members grouped as '{name}' are declared on different types: {', '.join(owners)}",
            details={"member": name, "owners": owners},
        )


class InternalError(DocmarkError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
