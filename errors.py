"""Error taxonomy for the chat-completion client.

Every failure the client can report is one of the classes below. The text of
each error is safe to print to a terminal or write to a log: it never contains
the API key, the Authorization header, or more than a bounded slice of
upstream content.
"""

from typing import Optional


# Upper bound for any upstream-sourced text reflected into an error message
MAX_UPSTREAM_MESSAGE_CHARS = 500


def truncate(text: str, limit: int = MAX_UPSTREAM_MESSAGE_CHARS) -> str:
    """Cap ``text`` at ``limit`` characters, marking the cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def redact(text: str, secret: Optional[str]) -> str:
    """Replace every occurrence of ``secret`` in ``text``."""
    if not secret:
        return text
    return text.replace(secret, "***")


class ClientError(Exception):
    """Base class for all classified client failures."""

    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(ClientError):
    """Bad local input: missing key, non-positive token limit, bad endpoint."""

    exit_code = 2


class TransportError(ClientError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str, reason: str = "network"):
        super().__init__(message)
        self.reason = reason


class AuthenticationError(ClientError):
    """Upstream rejected the credentials (HTTP 401/403)."""

    def __init__(self, status_code: int):
        super().__init__(
            f"Authentication failed (HTTP {status_code}): "
            "check LLM_API_KEY or OPENAI_API_KEY"
        )
        self.status_code = status_code


class _UpstreamMessageError(ClientError):
    """Error that may carry a capped message from the upstream error envelope."""

    prefix = "API error"

    def __init__(self, status_code: int, upstream_message: Optional[str] = None):
        self.status_code = status_code
        self.upstream_message = (
            truncate(upstream_message) if upstream_message else None
        )
        message = f"{self.prefix} (HTTP {status_code})"
        if self.upstream_message:
            message = f"{message}: {self.upstream_message}"
        super().__init__(message)


class RateLimitError(_UpstreamMessageError):
    prefix = "Rate limited"


class InvalidRequestError(_UpstreamMessageError):
    prefix = "Invalid request"


class UpstreamServerError(_UpstreamMessageError):
    prefix = "Upstream server error"


class UnexpectedStatusError(ClientError):
    def __init__(self, status_code: int):
        super().__init__(f"Unexpected HTTP status {status_code}")
        self.status_code = status_code


class MalformedResponseError(ClientError):
    """2xx reply whose body is not a chat-completion document."""

    def __init__(self, detail: str, excerpt: str = ""):
        self.detail = detail
        self.excerpt = excerpt
        message = f"Malformed response: {detail}"
        if excerpt:
            message = f"{message} (body starts with: {excerpt!r})"
        super().__init__(message)


class EmptyResponseError(ClientError):
    def __init__(self, message: str = "No response choices returned"):
        super().__init__(message)
