"""Turns a resolved configuration into a chat-completion request."""

from config import Configuration
from errors import ValidationError
from models.request import ChatRequest, Message


# ~8k tokens at roughly 4 characters per token
MAX_PROMPT_LENGTH = 32000


def build_chat_request(config: Configuration) -> ChatRequest:
    """Build the request body for ``config``.

    The prompt becomes the single user message, unchanged. Raises
    ``ValidationError`` instead of clamping or trimming anything.
    """
    max_tokens = config.max_tokens
    if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
        raise ValidationError(f"max_tokens must be a positive integer, got {max_tokens}")

    if not config.prompt:
        raise ValidationError("Prompt must not be empty")

    if len(config.prompt) > MAX_PROMPT_LENGTH:
        raise ValidationError(
            f"Prompt too long: {len(config.prompt)} chars (max: {MAX_PROMPT_LENGTH})"
        )

    return ChatRequest(
        model=config.model,
        messages=[Message(role="user", content=config.prompt)],
        max_tokens=max_tokens,
        temperature=config.temperature,
    )
