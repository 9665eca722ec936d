"""HTTP client for OpenAI-compatible chat-completions endpoints."""

import logging
import time

import requests

from config import Configuration, DEFAULT_TIMEOUT_SECONDS
from errors import TransportError, ValidationError, redact
from models.request import ChatRequest
from models.response import HttpReply
from services.request_builder import build_chat_request
from services.response_interpreter import interpret

logger = logging.getLogger(__name__)


class LLMClient:
    """Sends one chat-completion request per call.

    The API key is passed into every call and never stored on the client.
    No retries: a failed attempt is reported to the caller as-is.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.timeout = timeout

    def send(self, request: ChatRequest, endpoint: str, api_key: str) -> HttpReply:
        """POST ``request`` to ``endpoint`` and return the raw status and body.

        Raises:
            TransportError: DNS, connection, TLS or timeout failure.
            ValidationError: the endpoint is not a usable URL.
        """
        logger.info(f"Sending chat completion request to {endpoint} (model={request.model})")
        started = time.monotonic()

        try:
            response = requests.post(
                endpoint,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json"
                },
                json=request.to_wire(),
                timeout=self.timeout
            )

        except requests.exceptions.Timeout:
            logger.debug(f"Request to {endpoint} timed out after {self.timeout}s")
            raise TransportError(
                f"Request timed out after {self.timeout:g}s", reason="timeout"
            ) from None

        except requests.exceptions.SSLError as e:
            logger.debug(f"TLS failure talking to {endpoint}")
            raise TransportError(
                f"TLS error: {_describe(e, api_key)}", reason="tls"
            ) from None

        except requests.exceptions.ConnectionError as e:
            logger.debug(f"Could not connect to {endpoint}")
            raise TransportError(
                f"Connection error: {_describe(e, api_key)}", reason="connection"
            ) from None

        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ):
            raise ValidationError(f"Invalid endpoint URL: {endpoint!r}") from None

        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request error: {_describe(e, api_key)}") from None

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"Chat completion response: HTTP {response.status_code} in {elapsed_ms}ms")

        return HttpReply(
            status_code=response.status_code,
            body=response.content,
            elapsed_ms=elapsed_ms,
        )

    def complete(self, config: Configuration) -> str:
        """Run the full prompt -> reply cycle for ``config``."""
        request = build_chat_request(config)
        reply = self.send(
            request,
            config.endpoint,
            config.api_key.get_secret_value(),
        )
        return interpret(reply, secret=config.api_key.get_secret_value())


def _describe(exc: Exception, api_key: str) -> str:
    """Short, key-free, single-line description of a transport exception."""
    text = " ".join(redact(str(exc), api_key).split())
    return text[:200] or type(exc).__name__
