"""Tests for error kinds and messages."""

from chain_tx_tracker.core.errors import (
    UNKNOWN_ERROR_MESSAGE,
    ConfigurationError,
    ErrorKind,
    RateLimitError,
    RPCResponseError,
    TransportError,
    UnsupportedChainError,
    ValidationError,
    get_error_message,
)


def test_error_kinds_are_distinct():
    assert ValidationError("bad").kind == ErrorKind.VALIDATION
    assert ConfigurationError("missing").kind == ErrorKind.CONFIGURATION
    assert UnsupportedChainError(5).kind == ErrorKind.UNSUPPORTED_CHAIN
    assert TransportError("down").kind == ErrorKind.TRANSPORT
    assert RateLimitError().kind == ErrorKind.RATE_LIMIT
    assert RPCResponseError("odd").kind == ErrorKind.RPC_RESPONSE


def test_rate_limit_is_a_transport_error():
    error = RateLimitError(chain_id=137)

    assert isinstance(error, TransportError)
    assert error.status_code == 429
    assert error.chain_id == 137
    assert "Rate limit" in error.message


def test_unsupported_chain_is_a_configuration_error():
    error = UnsupportedChainError(5)

    assert isinstance(error, ConfigurationError)
    assert error.chain_id == 5
    assert error.message == "Unsupported chain: 5"


def test_get_error_message():
    assert get_error_message(ValidationError("Invalid wallet address")) == "Invalid wallet address"
    assert get_error_message(RuntimeError("boom")) == "boom"
    assert get_error_message("plain text") == "plain text"
    assert get_error_message(RuntimeError()) == UNKNOWN_ERROR_MESSAGE
    assert get_error_message(None) == UNKNOWN_ERROR_MESSAGE
