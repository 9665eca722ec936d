"""Configuration management using pydantic-settings."""

import math
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, SecretStr
from pydantic import ValidationError as SettingsValidationError
from pydantic_settings import BaseSettings

from errors import ValidationError


DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TIMEOUT_SECONDS = 30.0


class Settings(BaseSettings):
    """Environment-level settings, read from the process environment and ``.env``.

    The ``LLM_*`` names win over the legacy ``OPENAI_*`` ones when both are set.
    """

    # Credentials
    api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY"),
    )

    # Upstream
    endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        validation_alias=AliasChoices("LLM_ENDPOINT", "OPENAI_API_ENDPOINT"),
    )
    model: str = Field(default=DEFAULT_MODEL, validation_alias="LLM_MODEL")

    # Request limits
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, validation_alias="LLM_MAX_TOKENS")
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS, validation_alias="LLM_TIMEOUT_SECONDS"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


class Configuration(BaseModel):
    """Resolved, read-only parameters for one invocation."""

    api_key: SecretStr
    endpoint: str
    model: str
    max_tokens: int
    prompt: str
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    temperature: Optional[float] = None

    class Config:
        frozen = True


def get_settings() -> Settings:
    """Load settings from the environment.

    Not cached: the settings hold the API key and are only needed once, while
    the configuration is resolved.
    """
    try:
        return Settings()
    except SettingsValidationError as exc:
        # Only field names are reported; the rejected values stay out of the message
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError(
            f"Invalid environment configuration for: {', '.join(fields)}"
        ) from None
    except (UnicodeDecodeError, OSError):
        raise ValidationError("Could not read .env file") from None


def resolve_configuration(args, settings: Optional[Settings] = None) -> Configuration:
    """Merge parsed CLI arguments over environment settings.

    ``args`` is any object with ``prompt``, ``model``, ``max_tokens``,
    ``endpoint``, ``timeout`` and ``temperature`` attributes; a ``None`` value
    falls back to the environment.
    """
    if settings is None:
        settings = get_settings()

    api_key = settings.api_key.get_secret_value() if settings.api_key else ""
    if not api_key:
        raise ValidationError("LLM_API_KEY or OPENAI_API_KEY is not set")

    # HTTP header values are latin-1
    try:
        api_key.encode("latin-1")
    except UnicodeEncodeError:
        raise ValidationError(
            "API key contains characters that cannot be sent in an HTTP header"
        ) from None

    def pick(name: str, fallback):
        value = getattr(args, name, None)
        return fallback if value is None else value

    timeout = pick("timeout", settings.timeout_seconds)
    if not math.isfinite(timeout) or timeout <= 0:
        raise ValidationError(f"Timeout must be a positive number of seconds, got {timeout}")

    temperature = getattr(args, "temperature", None)
    if temperature is not None and not 0.0 <= temperature <= 2.0:
        raise ValidationError(f"Temperature must be between 0 and 2, got {temperature}")

    return Configuration(
        api_key=api_key,
        endpoint=pick("endpoint", settings.endpoint),
        model=pick("model", settings.model),
        max_tokens=pick("max_tokens", settings.max_tokens),
        prompt=getattr(args, "prompt", "") or "",
        timeout=timeout,
        temperature=temperature,
    )
