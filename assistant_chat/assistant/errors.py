"""Error taxonomy for chat turns and upstream failure classification.

Every failure that reaches the HTTP boundary is a ChatError carrying one
ErrorKind, a stable status code, and a message fit to show the user.
Upstream exceptions are mapped with ``classify``, a best-effort inspection of
status codes and message keywords. Unknown shapes fall through to
``ErrorKind.INTERNAL_ERROR``.
"""

import ssl
from enum import Enum

import openai


class ErrorKind(str, Enum):
    """Failure categories surfaced to the chat client."""

    INVALID_REQUEST = "invalid_request"
    UPSTREAM_MISCONFIGURED = "upstream_misconfigured"
    UPSTREAM_AUTH_ERROR = "upstream_auth_error"
    UPSTREAM_RATE_LIMITED = "upstream_rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_RUN_FAILED = "upstream_run_failed"
    TIMEOUT = "timeout"
    NO_ASSISTANT_RESPONSE = "no_assistant_response"
    INTERNAL_ERROR = "internal_error"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.UPSTREAM_MISCONFIGURED: 400,
    ErrorKind.UPSTREAM_AUTH_ERROR: 401,
    ErrorKind.UPSTREAM_RATE_LIMITED: 429,
    ErrorKind.UPSTREAM_UNAVAILABLE: 503,
    ErrorKind.UPSTREAM_RUN_FAILED: 500,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.NO_ASSISTANT_RESPONSE: 500,
    ErrorKind.INTERNAL_ERROR: 500,
}

_MODEL_KEYWORDS = ("model", "does not exist", "invalid model", "not found")
_AUTH_KEYWORDS = ("api key", "authentication", "unauthorized", "invalid_api_key")
_RATE_LIMIT_KEYWORDS = ("rate limit",)
_NETWORK_KEYWORDS = (
    "connection",
    "network",
    "fetch",
    "econnrefused",
    "timeout",
    "timed out",
    "econnreset",
    "certificate",
    "issuer",
    "ssl",
)
_NETWORK_CODES = {"ECONNREFUSED", "ETIMEDOUT", "ECONNRESET", "UNABLE_TO_GET_ISSUER_CERT_LOCALLY"}


class ChatError(Exception):
    """Base class for failures reported to the chat client."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    default_message = "Failed to process chat message"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class InvalidRequestError(ChatError):
    """Raised when the turn request is malformed."""

    kind = ErrorKind.INVALID_REQUEST
    default_message = "Invalid messages format"


class UpstreamMisconfiguredError(ChatError):
    """Raised when the assistant or its model cannot be found upstream."""

    kind = ErrorKind.UPSTREAM_MISCONFIGURED


class UpstreamAuthError(ChatError):
    """Raised when the upstream rejects the credential."""

    kind = ErrorKind.UPSTREAM_AUTH_ERROR
    default_message = (
        "Authentication error: Please check your OpenAI API key. "
        "Make sure it's valid and has not expired."
    )


class UpstreamRateLimitedError(ChatError):
    """Raised when the upstream throttles requests."""

    kind = ErrorKind.UPSTREAM_RATE_LIMITED
    default_message = "Rate limit exceeded. Please try again later."


class UpstreamUnavailableError(ChatError):
    """Raised on network, TLS, or connectivity failures."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    default_message = "Unable to reach the assistant service. Please try again."


class UpstreamRunFailedError(ChatError):
    """Raised when the assistant run ends without completing."""

    kind = ErrorKind.UPSTREAM_RUN_FAILED

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason or "Unknown error"
        super().__init__(f"Run failed: {self.reason}")


class AssistantTimeoutError(ChatError):
    """Raised when the run does not finish before the poll deadline."""

    kind = ErrorKind.TIMEOUT
    default_message = "Request timed out"


class NoAssistantResponseError(ChatError):
    """Raised when a completed run left no assistant message in the thread."""

    kind = ErrorKind.NO_ASSISTANT_RESPONSE
    default_message = "No assistant response found"


class InternalError(ChatError):
    """Catch-all for failures that fit no other kind."""

    kind = ErrorKind.INTERNAL_ERROR


class ConfigurationError(InternalError):
    """Raised when process configuration is missing or invalid."""

    pass


def error_message(error: object) -> str:
    """Pull the most specific message out of an upstream error shape."""
    if isinstance(error, str):
        return error

    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message

    for holder in (getattr(error, "error", None), getattr(error, "body", None)):
        if isinstance(holder, dict) and isinstance(holder.get("message"), str):
            return holder["message"]
        nested = getattr(holder, "message", None)
        if isinstance(nested, str) and nested:
            return nested

    return str(error)


def status_code_of(error: object) -> int | None:
    """Return the upstream HTTP status carried by an error, if any."""
    for attr in ("status_code", "status", "statusCode"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value

    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def _cause_messages(error: object) -> str:
    """Join messages along the exception chain, lowercased."""
    parts: list[str] = []
    seen: set[int] = set()
    current: object | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        parts.append(error_message(current))
        current = getattr(current, "__cause__", None)
    return " | ".join(parts).lower()


def _is_connection_error(error: object) -> bool:
    if isinstance(error, (openai.APIConnectionError, ssl.SSLError, ConnectionError)):
        return True
    code = getattr(error, "code", None)
    return isinstance(code, str) and code.upper() in _NETWORK_CODES


def classify(error: object) -> ErrorKind:
    """Map a raw upstream failure to exactly one ErrorKind.

    Explicit 401/429 statuses win, then message keywords in a fixed order
    (model, auth, rate limit, network), then connection-shaped types.
    """
    if isinstance(error, ChatError):
        return error.kind

    status = status_code_of(error)
    if status == 401:
        return ErrorKind.UPSTREAM_AUTH_ERROR
    if status == 429:
        return ErrorKind.UPSTREAM_RATE_LIMITED

    text = _cause_messages(error)
    if any(keyword in text for keyword in _MODEL_KEYWORDS):
        return ErrorKind.UPSTREAM_MISCONFIGURED
    if any(keyword in text for keyword in _AUTH_KEYWORDS):
        return ErrorKind.UPSTREAM_AUTH_ERROR
    if any(keyword in text for keyword in _RATE_LIMIT_KEYWORDS):
        return ErrorKind.UPSTREAM_RATE_LIMITED
    if any(keyword in text for keyword in _NETWORK_KEYWORDS) or _is_connection_error(error):
        return ErrorKind.UPSTREAM_UNAVAILABLE

    return ErrorKind.INTERNAL_ERROR


def _root_cause_message(error: BaseException) -> str:
    root: BaseException = error
    while root.__cause__ is not None:
        root = root.__cause__
    return error_message(root)


def to_chat_error(error: BaseException) -> ChatError:
    """Convert any exception into the ChatError matching its classification."""
    if isinstance(error, ChatError):
        return error

    kind = classify(error)
    detail = error_message(error)

    if kind is ErrorKind.UPSTREAM_MISCONFIGURED:
        return UpstreamMisconfiguredError(
            f"Model error: {detail}. Check that the configured assistant "
            "and its model are available to this API key."
        )
    if kind is ErrorKind.UPSTREAM_AUTH_ERROR:
        return UpstreamAuthError()
    if kind is ErrorKind.UPSTREAM_RATE_LIMITED:
        return UpstreamRateLimitedError()
    if kind is ErrorKind.UPSTREAM_UNAVAILABLE:
        return UpstreamUnavailableError(
            f"Unable to reach the assistant service: {_root_cause_message(error)}. "
            "Please try again."
        )
    return InternalError(detail or None)
