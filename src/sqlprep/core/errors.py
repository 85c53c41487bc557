"""sqlprep error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Load (package resolution, parsing)
- 4xxx: Extract (constant resolution)
- 5xxx: Emit (generated file output)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Load (3xxx)
    LOAD_PACKAGE_NOT_FOUND = 3001
    LOAD_NO_SOURCE_FILES = 3002
    LOAD_PARSE_ERROR = 3003
    LOAD_MULTIPLE_PACKAGES = 3004
    LOAD_GRAMMAR_UNAVAILABLE = 3005

    # Extract (4xxx)
    EXTRACT_AMBIGUOUS_CONSTANT = 4001

    # Emit (5xxx)
    EMIT_WRITE_FAILED = 5001


@dataclass(frozen=True, slots=True)
class SqlPrepError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'LOAD_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SqlPrepError):
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


class LoadError(SqlPrepError):
    """Package resolution and parsing errors."""

    @classmethod
    def package_not_found(cls, target: str, reason: str) -> "LoadError":
        return cls(
            code=ErrorCode.LOAD_PACKAGE_NOT_FOUND,
            message=f"Failed to detect absolute path of the package {target!r}: {reason}",
            details={"target": target, "reason": reason},
        )

    @classmethod
    def no_source_files(cls, directory: str) -> "LoadError":
        return cls(
            code=ErrorCode.LOAD_NO_SOURCE_FILES,
            message=f"No Go source files in {directory}",
            details={"directory": directory},
        )

    @classmethod
    def parse_error(cls, path: str, line: int, error_count: int) -> "LoadError":
        return cls(
            code=ErrorCode.LOAD_PARSE_ERROR,
            message=f"Failed to parse {path}: {error_count} syntax error(s), first at line {line}",
            details={"path": path, "line": line, "error_count": error_count},
        )

    @classmethod
    def multiple_packages(cls, directory: str, names: list[str]) -> "LoadError":
        return cls(
            code=ErrorCode.LOAD_MULTIPLE_PACKAGES,
            message=f"Found multiple packages in {directory}: {', '.join(names)}",
            details={"directory": directory, "packages": names},
        )

    @classmethod
    def grammar_unavailable(cls, module: str) -> "LoadError":
        return cls(
            code=ErrorCode.LOAD_GRAMMAR_UNAVAILABLE,
            message=f"Tree-sitter grammar not available: {module}",
            details={"module": module},
        )


class ExtractionError(SqlPrepError):
    """Query extraction errors. Always fatal for the run."""

    @classmethod
    def ambiguous_constant(cls, name: str, sites: list[str] | None = None) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACT_AMBIGUOUS_CONSTANT,
            message=f"constant already defined, need unique name for {name}",
            details={"name": name, "declared_at": sites or []},
        )


class EmitError(SqlPrepError):
    """Generated file output errors."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "EmitError":
        return cls(
            code=ErrorCode.EMIT_WRITE_FAILED,
            message=f"Failed to write generated code to {path}: {reason}",
            details={"path": path, "reason": reason},
        )
