"""Utils package."""

from .errors import APIError, ErrorCode, raise_error, log_error
from .file_manager import FileManager
from .money import round_money, format_inr
from .validators import build_model

__all__ = [
    "APIError",
    "ErrorCode",
    "raise_error",
    "log_error",
    "FileManager",
    "round_money",
    "format_inr",
    "build_model",
]
