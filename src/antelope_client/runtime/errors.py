"""
Antelope Error Model

This module provides the error handling framework for the Antelope Python SDK.
Every failure raised by the codec, the chain types and the crypto primitives is
an ``AntelopeError`` subclass carrying a stable ``ErrorCode``.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes, grouped by failure class."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Validation errors (100-199)
    VALIDATION_ERROR = 100
    RANGE_ERROR = 101
    TYPE_MISMATCH = 102

    # Schema errors (200-299)
    SCHEMA_ERROR = 200
    UNKNOWN_TYPE = 201
    MISSING_ABI = 202

    # Decoding errors (300-399)
    DECODING_ERROR = 300
    BUFFER_UNDERRUN = 301
    EXCESS_DATA = 302
    TAG_OUT_OF_RANGE = 303

    # Crypto errors (400-499)
    CRYPTO_ERROR = 400
    INVALID_CHECKSUM = 401
    LENGTH_ERROR = 402
    UNSUPPORTED_CURVE = 403
    SIGNATURE_RECOVERY = 404

    # API errors (500-599)
    API_ERROR = 500


class AntelopeError(Exception):
    """
    Base class for all Antelope errors.

    Provides structured error information: a code, a message, optional
    details and the underlying exception, if any.
    """

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an Antelope error.

        Args:
            message: Error message
            code: Error code, defaults to the class default
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AntelopeError':
        """Create error from dictionary representation."""
        try:
            code = ErrorCode(data.get("code", ErrorCode.UNKNOWN))
        except ValueError:
            code = ErrorCode.UNKNOWN
        message = data.get("message", "Unknown error")
        details = data.get("details")
        return cls(message, code, details)


class ValidationError(AntelopeError):
    """Malformed literal text or value for a chain type."""

    default_code = ErrorCode.VALIDATION_ERROR


class RangeError(AntelopeError):
    """Numeric overflow, underflow or precision mismatch."""

    default_code = ErrorCode.RANGE_ERROR


class TypeMismatchError(AntelopeError):
    """Value shape disagrees with the declared schema type."""

    default_code = ErrorCode.TYPE_MISMATCH


class SchemaError(AntelopeError):
    """Schema resolution failure."""

    default_code = ErrorCode.SCHEMA_ERROR


class UnknownTypeError(SchemaError):
    """A type name cannot be resolved against built-ins and the supplied ABI."""

    default_code = ErrorCode.UNKNOWN_TYPE


class MissingABIError(SchemaError):
    """An ABI is needed to interpret a value but none was supplied."""

    default_code = ErrorCode.MISSING_ABI


class DecodingError(AntelopeError):
    """Malformed binary input."""

    default_code = ErrorCode.DECODING_ERROR


class BufferUnderrunError(DecodingError):
    """Fewer bytes remain than the type requires."""

    default_code = ErrorCode.BUFFER_UNDERRUN


class ExcessDataError(DecodingError):
    """Bytes remain after a strict top-level decode."""

    default_code = ErrorCode.EXCESS_DATA


class TagOutOfRangeError(DecodingError):
    """Variant tag does not index a member type."""

    default_code = ErrorCode.TAG_OUT_OF_RANGE


class CryptoError(AntelopeError):
    """Key, signature or text encoding failure."""

    default_code = ErrorCode.CRYPTO_ERROR


class InvalidChecksumError(CryptoError):
    """Checksum embedded in a base58 string does not match its payload."""

    default_code = ErrorCode.INVALID_CHECKSUM


class LengthError(CryptoError):
    """Payload length disagrees with the fixed length of its type."""

    default_code = ErrorCode.LENGTH_ERROR


class UnsupportedCurveError(CryptoError):
    """Operation is not available for the key type."""

    default_code = ErrorCode.UNSUPPORTED_CURVE


class SignatureRecoveryError(CryptoError):
    """Public key cannot be recovered from a signature and digest."""

    default_code = ErrorCode.SIGNATURE_RECOVERY


class APIError(AntelopeError):
    """Error envelope returned by a chain API provider."""

    default_code = ErrorCode.API_ERROR

    @property
    def name(self) -> Optional[str]:
        """Node-side error name, e.g. ``tx_net_usage_exceeded``."""
        return self.details.get("name")

    @property
    def error_code(self) -> Optional[int]:
        """Node-side numeric error code."""
        return self.details.get("code")


def error_from_response(response: Dict[str, Any]) -> Optional[APIError]:
    """
    Create an error from an API response envelope.

    Args:
        response: API response that may contain an ``error`` member

    Returns:
        APIError instance or None if the response carries no error
    """
    if "error" not in response:
        return None

    error_data = response["error"]
    if isinstance(error_data, str):
        return APIError(error_data)

    if not isinstance(error_data, dict):
        return APIError(str(error_data))

    message = error_data.get("what") or response.get("message") or "Unknown error"
    details = {
        "code": error_data.get("code"),
        "name": error_data.get("name"),
        "details": error_data.get("details", []),
    }
    if "code" in response:
        details["status"] = response["code"]
    return APIError(message, details=details)


__all__ = [
    "ErrorCode",
    "AntelopeError",
    "ValidationError",
    "RangeError",
    "TypeMismatchError",
    "SchemaError",
    "UnknownTypeError",
    "MissingABIError",
    "DecodingError",
    "BufferUnderrunError",
    "ExcessDataError",
    "TagOutOfRangeError",
    "CryptoError",
    "InvalidChecksumError",
    "LengthError",
    "UnsupportedCurveError",
    "SignatureRecoveryError",
    "APIError",
    "error_from_response",
]
