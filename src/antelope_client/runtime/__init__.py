"""Runtime helpers for the Antelope Python SDK"""

from .errors import AntelopeError, ErrorCode, error_from_response

__all__ = [
    "AntelopeError",
    "ErrorCode",
    "error_from_response",
]
