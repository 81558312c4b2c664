"""
IRIS Hub SDK Error Model

This module provides the error handling framework for the SDK. Every error
carries a codespace, a numeric code and a human-readable log so that callers
can branch on the kind of failure (validation, preparation, signing, node
rejection, transport) rather than parsing strings.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List
from enum import IntEnum


ROOT_CODESPACE = "sdk"
CLIENT_CODESPACE = "client"


class ErrorCode(IntEnum):
    """Client-side error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    INTERNAL = 1
    TX_DECODE = 2
    INVALID_SEQUENCE = 3
    UNAUTHORIZED = 4
    INSUFFICIENT_FUNDS = 5
    UNKNOWN_REQUEST = 6
    INVALID_ADDRESS = 7
    UNKNOWN_ADDRESS = 9
    INVALID_COINS = 10
    OUT_OF_GAS = 12
    MEMO_TOO_LARGE = 13
    INSUFFICIENT_FEE = 14

    # Client pipeline errors (100-199)
    VALIDATION = 100
    ADDRESS_NOT_FOUND = 101
    ACCOUNT_NOT_FOUND = 102
    TOKEN_NOT_FOUND = 103
    CONVERSION = 104
    SIGNING = 105
    TRANSPORT = 106
    NOT_FOUND = 107
    INVALID_QUERY = 108
    UNSUPPORTED_MODE = 109

    # Encoding errors (200-299)
    ENCODING_ERROR = 200
    INVALID_JSON = 201
    INVALID_BINARY = 202


class SdkError(Exception):
    """
    Base class for all SDK errors.

    Provides structured error information: a codespace namespacing the code,
    the numeric code and the log reported by whoever raised it.
    """

    def __init__(self, log: str, code: int = ErrorCode.INTERNAL,
                 codespace: str = CLIENT_CODESPACE,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an SDK error.

        Args:
            log: Human-readable error message
            code: Numeric error code
            codespace: Namespace the code belongs to
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(log)
        self.log = log
        self.code = code
        self.codespace = codespace
        self.details = details or {}
        self.cause = cause
        # Results already obtained before the failure (batch submissions)
        self.results: List[Any] = []

    @property
    def message(self) -> str:
        return self.log

    def __str__(self) -> str:
        """String representation of the error."""
        code = self.code.name if isinstance(self.code, ErrorCode) else str(int(self.code))
        parts = [f"[{self.codespace}:{code}] {self.log}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "codespace": self.codespace,
            "code": int(self.code),
            "log": self.log,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SdkError':
        """Create error from dictionary representation."""
        return cls(
            data.get("log", "unknown error"),
            code=data.get("code", ErrorCode.INTERNAL),
            codespace=data.get("codespace", CLIENT_CODESPACE),
            details=data.get("details"),
        )


class ValidationError(SdkError):
    """A message or input failed validation before any network call."""

    def __init__(self, log: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.VALIDATION, CLIENT_CODESPACE, details, cause)


class PreparationError(SdkError):
    """Transaction context preparation failed."""

    def __init__(self, log: str, code: int = ErrorCode.INTERNAL,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, code, CLIENT_CODESPACE, details, cause)


class AddressNotFoundError(PreparationError):
    """The sender identity could not be resolved to an address."""

    def __init__(self, log: str = "address not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.ADDRESS_NOT_FOUND, details, cause)


class AccountNotFoundError(PreparationError):
    """The chain has no account for the address."""

    def __init__(self, log: str = "account not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.ACCOUNT_NOT_FOUND, details, cause)


class TokenNotFoundError(PreparationError):
    """Token metadata could not be resolved."""

    def __init__(self, log: str = "token not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.TOKEN_NOT_FOUND, details, cause)


class ConversionError(PreparationError):
    """A coin amount could not be rescaled between units."""

    def __init__(self, log: str = "coin conversion failed",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.CONVERSION, details, cause)


class SigningError(SdkError):
    """Building or signing the transaction failed."""

    def __init__(self, log: str = "signing failed",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.SIGNING, CLIENT_CODESPACE, details, cause)


class NodeError(SdkError):
    """The node reported a non-OK response. Codespace, code and log are verbatim."""

    def __init__(self, codespace: str, code: int, log: str,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, code, codespace or ROOT_CODESPACE, details, cause)


class TransportError(SdkError):
    """The call to the node did not complete."""

    def __init__(self, log: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.TRANSPORT, CLIENT_CODESPACE, details, cause)


class NotFoundError(SdkError):
    """A requested transaction has no record on the node."""

    def __init__(self, log: str = "not found", details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.NOT_FOUND, CLIENT_CODESPACE, details, cause)


class InvalidQueryError(SdkError):
    """A search was requested without any filter."""

    def __init__(self, log: str = "must declare at least one tag to search",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.INVALID_QUERY, CLIENT_CODESPACE, details, cause)


class EncodingError(SdkError):
    """Data encoding/decoding errors."""

    def __init__(self, log: str, code: int = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(log, code, CLIENT_CODESPACE, details, cause)


class InternalError(SdkError):
    """An unexpected fault recovered at the orchestration boundary."""

    def __init__(self, log: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(log, ErrorCode.INTERNAL, CLIENT_CODESPACE, details, cause)


def get_error(codespace: str, code: int, log: str) -> NodeError:
    """
    Build a node error from the fields of an ABCI response.

    Args:
        codespace: Codespace reported by the node (empty means root)
        code: Response code
        log: Response log

    Returns:
        NodeError carrying the values verbatim
    """
    return NodeError(codespace or ROOT_CODESPACE, code, log)


def error_from_response(response: Dict[str, Any]) -> Optional[SdkError]:
    """
    Create an appropriate error from a JSON-RPC response.

    Args:
        response: Decoded JSON-RPC response

    Returns:
        Error instance or None if the response carries no error
    """
    if "error" not in response:
        return None

    error_data = response["error"]
    if isinstance(error_data, str):
        return TransportError(error_data)

    if not isinstance(error_data, dict):
        return TransportError(str(error_data))

    message = error_data.get("message", "unknown error")
    data = error_data.get("data")
    log = f"{message}: {data}" if isinstance(data, str) and data else message

    # Internal/invalid-params errors carry the node's own reason in data
    if error_data.get("code") in (-32603, -32602):
        if isinstance(data, str) and "not found" in data.lower():
            return NotFoundError(log, details={"rpc_code": error_data.get("code")})
        return NodeError(ROOT_CODESPACE, ErrorCode.UNKNOWN_REQUEST, log,
                         details={"rpc_code": error_data.get("code")})

    return TransportError(log, details={"rpc_code": error_data.get("code")})


__all__ = [
    "ROOT_CODESPACE",
    "CLIENT_CODESPACE",
    "ErrorCode",
    "SdkError",
    "ValidationError",
    "PreparationError",
    "AddressNotFoundError",
    "AccountNotFoundError",
    "TokenNotFoundError",
    "ConversionError",
    "SigningError",
    "NodeError",
    "TransportError",
    "NotFoundError",
    "InvalidQueryError",
    "EncodingError",
    "InternalError",
    "get_error",
    "error_from_response",
]
