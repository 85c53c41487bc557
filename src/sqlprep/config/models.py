"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SQLPREP__SECTION__KEY)
3. Project YAML (sqlprep.yaml in the working directory)
4. Global YAML (~/.config/sqlprep/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SQLPREP__<SECTION>__<KEY>=<VALUE>

Examples:
    SQLPREP__LOGGING__LEVEL=DEBUG
    SQLPREP__LOADER__INCLUDE_TESTS=false
    SQLPREP__OUTPUT__FILENAME=prepared_statements.go

The query-executing method table is not part of the configuration; see
sqlprep.extract.methods.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

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
        SQLPREP__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LoaderConfig(BaseModel):
    """Package loading configuration.

    Env vars:
        SQLPREP__LOADER__GO_BINARY: go executable used to resolve import paths
        SQLPREP__LOADER__INCLUDE_TESTS: scan *_test.go files of the package
        SQLPREP__LOADER__MAX_FILE_SIZE_MB: skip files larger than this
    """

    go_binary: str = Field(
        default="go",
        description="go executable used to resolve import paths with 'go list'.",
    )
    include_tests: bool = Field(
        default=True,
        description="Scan *_test.go files that belong to the package itself.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip source files larger than this (MB).",
    )

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class OutputConfig(BaseModel):
    """Generated file configuration.

    Env vars:
        SQLPREP__OUTPUT__FILENAME: generated file name inside the package dir
        SQLPREP__OUTPUT__VAR_NAME: package variable assigned in init()
    """

    filename: str = Field(default="prepared_statements.go")
    var_name: str = Field(default="prepStatements")

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v.endswith(".go"):
            raise ValueError(f"Output file must be a .go file: {v}")
        if Path(v).name != v:
            raise ValueError(f"Output file must be a bare file name: {v}")
        return v

    @field_validator("var_name")
    @classmethod
    def validate_var_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Not a valid Go identifier: {v}")
        return v


class SqlPrepConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
