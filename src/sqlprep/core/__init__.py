"""Core module exports."""

from sqlprep.core.errors import (
    ConfigError,
    EmitError,
    ErrorCode,
    ExtractionError,
    LoadError,
    SqlPrepError,
)
from sqlprep.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from sqlprep.core.progress import pluralize, status

__all__ = [
    # Errors
    "SqlPrepError",
    "ConfigError",
    "EmitError",
    "ErrorCode",
    "ExtractionError",
    "LoadError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "status",
]
