"""Response models for the chat-completions API."""

from pydantic import BaseModel
from typing import List, Optional, Union


class ResponseMessage(BaseModel):
    """Assistant message inside a choice."""
    role: Optional[str] = None
    content: Optional[str] = None

    class Config:
        extra = "ignore"


class Choice(BaseModel):
    """A single completion candidate."""
    message: ResponseMessage
    index: Optional[int] = None
    finish_reason: Optional[str] = None

    class Config:
        extra = "ignore"


class ApiError(BaseModel):
    """Error details reported by the upstream provider."""
    message: str = ""
    type: Optional[str] = None
    code: Optional[Union[str, int]] = None

    class Config:
        extra = "ignore"


class ChatResponse(BaseModel):
    """Chat-completion reply.

    ``choices`` is ``None`` when the field is missing entirely, which is
    distinct from an empty list.
    """
    choices: Optional[List[Choice]] = None
    error: Optional[ApiError] = None

    class Config:
        extra = "ignore"


class ErrorEnvelope(BaseModel):
    """Body of a non-2xx reply: ``{"error": {...}}``."""
    error: ApiError

    class Config:
        extra = "ignore"


class HttpReply(BaseModel):
    """Raw outcome of the HTTP exchange, before interpretation.

    ``body`` holds the undecoded bytes; the JSON parser detects the encoding.
    """
    status_code: int
    body: bytes = b""
    elapsed_ms: Optional[int] = None
