"""Core infrastructure components for the rating service."""

from .config import Settings, get_settings
from .logging_utils import configure_logging, get_logger
from .result_types import Err, Ok, Result

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "Result",
    "Ok",
    "Err",
]
