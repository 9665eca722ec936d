import argparse

import pytest

import config as mod
from errors import ValidationError

SECRET = "sk-config-secret"


def cli_args(**overrides):
    values = dict(
        prompt="hello",
        model=None,
        max_tokens=None,
        endpoint=None,
        timeout=None,
        temperature=None,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


def test_defaults(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    config = mod.resolve_configuration(cli_args())

    assert config.api_key.get_secret_value() == SECRET
    assert config.endpoint == mod.DEFAULT_ENDPOINT
    assert config.model == "gpt-3.5-turbo"
    assert config.max_tokens == 1000
    assert config.timeout == 30.0
    assert config.temperature is None
    assert config.prompt == "hello"


def test_missing_key_fails_fast():
    with pytest.raises(ValidationError) as exc:
        mod.resolve_configuration(cli_args())
    assert "LLM_API_KEY" in str(exc.value)


def test_empty_key_counts_as_missing(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "")
    with pytest.raises(ValidationError):
        mod.resolve_configuration(cli_args())


def test_legacy_names(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-legacy")
    monkeypatch.setenv("OPENAI_API_ENDPOINT", "http://localhost:11434/v1/chat/completions")
    config = mod.resolve_configuration(cli_args())

    assert config.api_key.get_secret_value() == "sk-legacy"
    assert config.endpoint == "http://localhost:11434/v1/chat/completions"


def test_new_names_win_over_legacy(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "sk-new")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-legacy")
    monkeypatch.setenv("LLM_ENDPOINT", "http://new.example/v1/chat/completions")
    monkeypatch.setenv("OPENAI_API_ENDPOINT", "http://legacy.example/v1/chat/completions")
    config = mod.resolve_configuration(cli_args())

    assert config.api_key.get_secret_value() == "sk-new"
    assert config.endpoint == "http://new.example/v1/chat/completions"


def test_cli_flags_take_precedence(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    monkeypatch.setenv("LLM_ENDPOINT", "http://env.example/v1/chat/completions")
    monkeypatch.setenv("LLM_MODEL", "env-model")
    monkeypatch.setenv("LLM_MAX_TOKENS", "64")
    monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "5")
    config = mod.resolve_configuration(cli_args(
        endpoint="http://cli.example/v1/chat/completions",
        model="gpt-4",
        max_tokens=200,
        timeout=9.5,
        temperature=0.7,
    ))

    assert config.endpoint == "http://cli.example/v1/chat/completions"
    assert config.model == "gpt-4"
    assert config.max_tokens == 200
    assert config.timeout == 9.5
    assert config.temperature == 0.7


def test_environment_defaults_apply_without_flags(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    monkeypatch.setenv("LLM_MODEL", "llama3")
    monkeypatch.setenv("LLM_MAX_TOKENS", "64")
    monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "5")
    config = mod.resolve_configuration(cli_args())

    assert config.model == "llama3"
    assert config.max_tokens == 64
    assert config.timeout == 5.0


def test_dotenv_file_is_read(tmp_path):
    # The autouse fixture has already moved into tmp_path
    (tmp_path / ".env").write_text(
        "LLM_API_KEY=sk-from-dotenv\nLLM_ENDPOINT=http://dotenv.example/v1/chat/completions\nUNRELATED=1\n",
        encoding="utf-8",
    )
    config = mod.resolve_configuration(cli_args())

    assert config.api_key.get_secret_value() == "sk-from-dotenv"
    assert config.endpoint == "http://dotenv.example/v1/chat/completions"


def test_environment_beats_dotenv(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("LLM_API_KEY=sk-from-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("LLM_API_KEY", "sk-from-env")
    config = mod.resolve_configuration(cli_args())

    assert config.api_key.get_secret_value() == "sk-from-env"


def test_invalid_environment_value_names_field_only(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    monkeypatch.setenv("LLM_MAX_TOKENS", "lots")
    with pytest.raises(ValidationError) as exc:
        mod.resolve_configuration(cli_args())
    assert "LLM_MAX_TOKENS" in str(exc.value) or "max_tokens" in str(exc.value)
    assert "lots" not in str(exc.value)
    assert SECRET not in str(exc.value)


@pytest.mark.parametrize("timeout", [0, -1, float("inf"), float("nan")])
def test_bad_timeout(monkeypatch, timeout):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    with pytest.raises(ValidationError):
        mod.resolve_configuration(cli_args(timeout=timeout))


@pytest.mark.parametrize("temperature", [-0.1, 2.5])
def test_bad_temperature(monkeypatch, temperature):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    with pytest.raises(ValidationError):
        mod.resolve_configuration(cli_args(temperature=temperature))


def test_configuration_hides_key(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    config = mod.resolve_configuration(cli_args())

    assert SECRET not in repr(config)
    assert SECRET not in str(config)
    assert SECRET not in config.model_dump_json()


def test_configuration_is_frozen(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", SECRET)
    config = mod.resolve_configuration(cli_args())

    with pytest.raises(Exception):
        config.max_tokens = 5


@pytest.mark.parametrize("key", ["sk-t€st-secret", "sk-“quoted”", "sk-abc…"])
def test_key_outside_latin1_rejected(monkeypatch, key):
    monkeypatch.setenv("LLM_API_KEY", key)
    with pytest.raises(ValidationError) as exc:
        mod.resolve_configuration(cli_args())
    assert "HTTP header" in str(exc.value)
    assert key not in str(exc.value)


def test_unreadable_dotenv(tmp_path):
    (tmp_path / ".env").write_bytes(b"LLM_API_KEY=sk-\xff\xfe\n")
    with pytest.raises(ValidationError) as exc:
        mod.resolve_configuration(cli_args())
    assert str(exc.value) == "Could not read .env file"
