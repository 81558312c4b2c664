"""
Unit tests for the error model.

Tests codes, string rendering, dict round trips and the mapping of JSON-RPC
error payloads to typed errors.
"""

import pytest

from irishub_sdk.runtime.errors import (
    CLIENT_CODESPACE,
    ROOT_CODESPACE,
    AccountNotFoundError,
    AddressNotFoundError,
    ConversionError,
    ErrorCode,
    InvalidQueryError,
    NodeError,
    NotFoundError,
    PreparationError,
    SdkError,
    TokenNotFoundError,
    TransportError,
    ValidationError,
    error_from_response,
    get_error,
)


class TestSdkError:
    """Tests for the base error."""

    def test_fields(self):
        err = SdkError("boom", ErrorCode.SIGNING, "client", details={"k": "v"})
        assert err.log == "boom"
        assert err.message == "boom"
        assert err.code == ErrorCode.SIGNING
        assert err.codespace == "client"
        assert err.details == {"k": "v"}
        assert err.results == []

    def test_str_named_code(self):
        err = SdkError("boom", ErrorCode.TRANSPORT)
        assert str(err) == "[client:TRANSPORT] boom"

    def test_str_numeric_code_and_cause(self):
        err = SdkError("boom", 5, "bank", cause=ValueError("inner"))
        assert str(err) == "[bank:5] boom | Caused by: inner"

    def test_to_dict(self):
        err = SdkError("boom", ErrorCode.CONVERSION, details={"denom": "abc"})
        assert err.to_dict() == {
            "codespace": CLIENT_CODESPACE,
            "code": 104,
            "log": "boom",
            "details": {"denom": "abc"},
        }

    def test_from_dict(self):
        err = SdkError.from_dict({"codespace": "gov", "code": 3, "log": "bad"})
        assert (err.codespace, err.code, err.log) == ("gov", 3, "bad")


class TestErrorKinds:
    """Tests for the kind hierarchy callers branch on."""

    @pytest.mark.parametrize("cls,code", [
        (AddressNotFoundError, ErrorCode.ADDRESS_NOT_FOUND),
        (AccountNotFoundError, ErrorCode.ACCOUNT_NOT_FOUND),
        (TokenNotFoundError, ErrorCode.TOKEN_NOT_FOUND),
        (ConversionError, ErrorCode.CONVERSION),
    ])
    def test_preparation_errors(self, cls, code):
        err = cls()
        assert isinstance(err, PreparationError)
        assert isinstance(err, SdkError)
        assert err.code == code

    def test_validation_error(self):
        err = ValidationError("bad msg")
        assert err.code == ErrorCode.VALIDATION
        assert not isinstance(err, PreparationError)

    def test_invalid_query_default_log(self):
        assert InvalidQueryError().log == "must declare at least one tag to search"

    def test_get_error_keeps_node_values(self):
        err = get_error("bank", 10, "insufficient coins")
        assert isinstance(err, NodeError)
        assert (err.codespace, err.code, err.log) == ("bank", 10, "insufficient coins")

    def test_get_error_empty_codespace_is_root(self):
        assert get_error("", 4, "unauthorized").codespace == ROOT_CODESPACE


class TestErrorFromResponse:
    """Tests for JSON-RPC error mapping."""

    def test_no_error(self):
        assert error_from_response({"result": {}}) is None

    def test_not_found(self):
        err = error_from_response({
            "error": {"code": -32603, "message": "Internal error", "data": "tx (AB) not found"}
        })
        assert isinstance(err, NotFoundError)
        assert "not found" in err.log

    def test_internal_error(self):
        err = error_from_response({
            "error": {"code": -32603, "message": "Internal error", "data": "height 9 must be less"}
        })
        assert isinstance(err, NodeError)
        assert err.code == ErrorCode.UNKNOWN_REQUEST
        assert err.details == {"rpc_code": -32603}

    def test_other_codes_are_transport(self):
        err = error_from_response({"error": {"code": -32601, "message": "Method not found"}})
        assert isinstance(err, TransportError)

    def test_string_error(self):
        assert isinstance(error_from_response({"error": "oops"}), TransportError)
