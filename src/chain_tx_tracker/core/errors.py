"""Error kinds raised by the transaction discovery engine."""

from enum import StrEnum

import httpx


class ErrorKind(StrEnum):
    """Category of a discovery failure."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNSUPPORTED_CHAIN = "unsupported_chain"
    TRANSPORT = "transport"
    RATE_LIMIT = "rate_limit"
    RPC_RESPONSE = "rpc_response"


UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"

# JSON-RPC error codes providers use for throttling
RATE_LIMIT_RPC_CODES = frozenset({-32005, 429})


class TrackerError(Exception):
    """
    Base class for all discovery errors.

    Parameters
    ----------
    message : str
        Human readable description
    chain_id : int | None
        Chain the error belongs to, if any

    """

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, *, chain_id: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.chain_id = chain_id


class ValidationError(TrackerError):
    """Malformed caller input, such as an invalid address."""

    kind = ErrorKind.VALIDATION


class ConfigurationError(TrackerError):
    """Chain is registered but its endpoint configuration is missing or malformed."""

    kind = ErrorKind.CONFIGURATION


class UnsupportedChainError(ConfigurationError):
    """Chain identifier is not present in the registry."""

    kind = ErrorKind.UNSUPPORTED_CHAIN

    def __init__(self, chain_id: int) -> None:
        super().__init__(f"Unsupported chain: {chain_id}", chain_id=chain_id)


class TransportError(TrackerError):
    """
    Network or connection failure reaching an endpoint.

    Parameters
    ----------
    message : str
        Human readable description
    status_code : int | None
        HTTP status code, when the endpoint answered
    chain_id : int | None
        Chain the endpoint belongs to

    """

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        chain_id: int | None = None,
    ) -> None:
        super().__init__(message, chain_id=chain_id)
        self.status_code = status_code


class RateLimitError(TransportError):
    """Endpoint signalled throttling."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str = "Rate limit exceeded. Please try again in a moment.", **kwargs) -> None:
        kwargs.setdefault("status_code", 429)
        super().__init__(message, **kwargs)


class RPCResponseError(TransportError):
    """Endpoint answered with a JSON-RPC error object or an unreadable payload."""

    kind = ErrorKind.RPC_RESPONSE

    def __init__(self, message: str, *, code: int | None = None, chain_id: int | None = None) -> None:
        super().__init__(message, chain_id=chain_id)
        self.code = code


def is_rate_limit_message(message: str) -> bool:
    """Check a free-form error message for a throttling marker."""
    lowered = message.lower()
    return "429" in lowered or "rate limit" in lowered


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Decide whether an error is a rate-limit signal worth retrying.

    Parameters
    ----------
    error : BaseException
        Error raised by the operation

    Returns
    -------
    bool
        True for throttling signals, False for everything else

    """
    if isinstance(error, (ValidationError, ConfigurationError)):
        return False
    if isinstance(error, RateLimitError):
        return True
    if isinstance(error, httpx.HTTPStatusError) and error.response.status_code == 429:
        return True
    return is_rate_limit_message(str(error))


def get_error_message(error: object) -> str:
    """Return the most specific message available for an error."""
    if isinstance(error, TrackerError):
        return error.message
    if isinstance(error, BaseException) and str(error):
        return str(error)
    if isinstance(error, str) and error:
        return error
    return UNKNOWN_ERROR_MESSAGE
