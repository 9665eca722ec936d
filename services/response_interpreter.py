"""Maps an HTTP reply from the chat-completions endpoint to text or a typed error."""

import json
import logging
from typing import Optional

from pydantic import ValidationError as SchemaError

from errors import (
    AuthenticationError,
    EmptyResponseError,
    InvalidRequestError,
    MalformedResponseError,
    RateLimitError,
    UnexpectedStatusError,
    UpstreamServerError,
    redact,
)
from models.response import ChatResponse, ErrorEnvelope, HttpReply

logger = logging.getLogger(__name__)

# Size of the body excerpt kept for diagnostics on malformed replies
BODY_EXCERPT_CHARS = 200


def _upstream_message(body: bytes, secret: Optional[str]) -> Optional[str]:
    """Pull ``error.message`` out of an error envelope, if there is one."""
    try:
        envelope = ErrorEnvelope.model_validate_json(body)
    except (SchemaError, ValueError):
        return None
    return redact(envelope.error.message, secret) or None


def interpret(reply: HttpReply, secret: Optional[str] = None) -> str:
    """Return the first choice's message content, or raise a ``ClientError``.

    ``secret`` is scrubbed from any upstream text reflected into an error.
    """
    status = reply.status_code

    if 200 <= status < 300:
        return _extract_content(reply.body, secret)

    if status in (401, 403):
        logger.debug(f"Upstream rejected credentials with HTTP {status}")
        raise AuthenticationError(status)

    upstream_message = _upstream_message(reply.body, secret)

    if status == 429:
        raise RateLimitError(status, upstream_message)

    if status in (400, 422):
        raise InvalidRequestError(status, upstream_message)

    if status >= 500:
        raise UpstreamServerError(status, upstream_message)

    raise UnexpectedStatusError(status)


def _extract_content(body: bytes, secret: Optional[str]) -> str:
    excerpt = redact(body[:BODY_EXCERPT_CHARS].decode("utf-8", errors="replace"), secret)

    try:
        data = json.loads(body)
    except ValueError:
        logger.debug(f"Response body is not valid JSON: {excerpt!r}")
        raise MalformedResponseError("body is not valid JSON", excerpt) from None

    if not isinstance(data, dict):
        raise MalformedResponseError("expected a JSON object", excerpt)

    try:
        response = ChatResponse.model_validate(data)
    except SchemaError as exc:
        logger.debug(f"Response did not match the chat-completion schema: {exc.error_count()} error(s)")
        raise MalformedResponseError("unexpected response structure", excerpt) from None

    # Some providers answer 200 with an error envelope
    if response.error is not None:
        raise UpstreamServerError(200, redact(response.error.message, secret) or None)

    if response.choices is None:
        raise MalformedResponseError("missing 'choices' field", excerpt)

    if not response.choices:
        raise EmptyResponseError()

    content = response.choices[0].message.content
    if content is None:
        raise EmptyResponseError("First choice has no message content")

    return content
