"""Request models for the chat-completions API."""

from pydantic import BaseModel, Field
from typing import List, Optional


class Message(BaseModel):
    """A single role-tagged chat message."""
    role: str = Field(..., description="Message author role")
    content: str = Field(..., description="Message text")

    class Config:
        frozen = True


class ChatRequest(BaseModel):
    """Outgoing chat-completion request body.

    ``temperature`` is only sent when set; ``to_wire`` drops unset fields so the
    body matches what OpenAI-compatible servers expect.
    """
    model: str = Field(..., description="Model identifier, passed through verbatim")
    messages: List[Message] = Field(..., description="Ordered conversation")
    max_tokens: int = Field(..., description="Cap on generated tokens")
    temperature: Optional[float] = Field(default=None, description="Sampling temperature")

    class Config:
        frozen = True

    def to_wire(self) -> dict:
        """Return the JSON-ready request body."""
        return self.model_dump(exclude_none=True)
