import sys
import pathlib

import pytest
import uvicorn

# Make project root importable
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from tests import stub_server  # noqa: E402


CONFIG_ENV_VARS = [
    "LLM_API_KEY",
    "OPENAI_API_KEY",
    "LLM_ENDPOINT",
    "OPENAI_API_ENDPOINT",
    "LLM_MODEL",
    "LLM_MAX_TOKENS",
    "LLM_TIMEOUT_SECONDS",
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Start every test without LLM settings and away from any real .env file."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(scope="session")
def stub_url():
    """Base URL of a running chat-completions stub."""
    port = stub_server.free_port()
    server = stub_server.StubServer(
        uvicorn.Config(stub_server.app, host="127.0.0.1", port=port, log_level="warning")
    )
    thread = server.start_in_thread()
    yield f"http://127.0.0.1:{port}"
    server.should_exit = True
    thread.join(timeout=10)


@pytest.fixture
def received():
    stub_server.received.clear()
    return stub_server.received
