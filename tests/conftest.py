"""Shared pytest fixtures for imagegen tests."""

import base64
import json
import os
from pathlib import Path

import pytest
import requests

from imagegen.llm.provider_config import API_KEY_NAME, KEY_FILE_RELATIVE


TEST_API_KEY = "sk-or-test-secret-0123456789"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(64))
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


class FakeResponse:
    """Minimal stand-in for `requests.Response`."""

    def __init__(self, status_code=200, json_body=None, content=b"", text=None):
        self.status_code = status_code
        self._json_body = json_body
        self.content = content
        if text is not None:
            self.text = text
        elif json_body is not None:
            self.text = json.dumps(json_body)
        else:
            self.text = content.decode("latin-1")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json_body is None:
            raise ValueError("No JSON body")
        return self._json_body


class FakeHTTP:
    """Records outbound calls and replies from queued responses.

    Responses (or exceptions) are consumed in FIFO order per method.
    """

    def __init__(self):
        self.calls = []
        self.post_queue = []
        self.get_queue = []

    def queue_post(self, response):
        self.post_queue.append(response)

    def queue_get(self, response):
        self.get_queue.append(response)

    def _reply(self, queue, method, url):
        if not queue:
            raise AssertionError(f"Unexpected {method} {url}")
        reply = queue.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def post(self, url, headers=None, json=None, timeout=None, **kwargs):
        self.calls.append({"method": "POST", "url": url, "headers": headers, "json": json})
        return self._reply(self.post_queue, "POST", url)

    def get(self, url, timeout=None, **kwargs):
        self.calls.append({"method": "GET", "url": url, "headers": kwargs.get("headers")})
        return self._reply(self.get_queue, "GET", url)

    @property
    def posts(self):
        return [c for c in self.calls if c["method"] == "POST"]

    @property
    def gets(self):
        return [c for c in self.calls if c["method"] == "GET"]


@pytest.fixture(autouse=True)
def clean_api_key_env():
    """Keep `OPENROUTER_API_KEY` out of the environment for every test.

    dotenv writes straight into `os.environ`, so cleanup is done by hand.
    """
    saved = os.environ.pop(API_KEY_NAME, None)
    yield
    os.environ.pop(API_KEY_NAME, None)
    if saved is not None:
        os.environ[API_KEY_NAME] = saved


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch) -> Path:
    """Point the home directory at an empty temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def key_file(fake_home: Path) -> Path:
    """Create `~/.config/openrouter/.env` holding the test key."""
    path = fake_home / KEY_FILE_RELATIVE
    path.parent.mkdir(parents=True)
    path.write_text(f"{API_KEY_NAME}={TEST_API_KEY}\n")
    path.chmod(0o600)
    return path


@pytest.fixture
def fake_http(monkeypatch) -> FakeHTTP:
    """Replace `requests.post` / `requests.get` with a recording fake."""
    fake = FakeHTTP()
    monkeypatch.setattr(requests, "post", fake.post)
    monkeypatch.setattr(requests, "get", fake.get)
    return fake


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """Run the test from an empty working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def chat_response():
    """Factory wrapping a message object in a chat-completion envelope."""

    def _make(message):
        return FakeResponse(json_body={"choices": [{"index": 0, "message": message}]})

    return _make


@pytest.fixture
def images_response():
    """Factory wrapping a `data[0]` entry in an images-endpoint envelope."""

    def _make(entry):
        return FakeResponse(json_body={"created": 0, "data": [entry]})

    return _make


@pytest.fixture
def http_response():
    """Factory for arbitrary fake responses."""
    return FakeResponse


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def png_b64() -> str:
    return PNG_B64
