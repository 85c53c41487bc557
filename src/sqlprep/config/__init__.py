"""Config module exports."""

from sqlprep.config.loader import load_config
from sqlprep.config.models import (
    LoaderConfig,
    LoggingConfig,
    OutputConfig,
    SqlPrepConfig,
)

__all__ = [
    "load_config",
    "LoaderConfig",
    "LoggingConfig",
    "OutputConfig",
    "SqlPrepConfig",
]
