"""Tests for imagegen.llm.provider_config: credential loading and model routing.

Tests cover:
- Loading the key from ~/.config/openrouter/.env into the environment.
- Missing/empty credential handling.
- Environment precedence over the key file.
- Direct image model detection.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from imagegen.core.errors import ConfigurationError
from imagegen.llm.provider_config import (
    API_KEY_NAME,
    ENDPOINTS,
    KEY_FILE_RELATIVE,
    is_direct_image_model,
    key_file_path,
    load_api_key,
)


class TestLoadApiKey:
    """Verify credential resolution from the secured env file."""

    def test_key_file_path_under_home(self, fake_home: Path):
        assert key_file_path() == fake_home / ".config" / "openrouter" / ".env"

    def test_loads_key_from_file(self, key_file: Path, api_key: str):
        assert load_api_key() == api_key

    def test_key_injected_into_environment(self, key_file: Path, api_key: str):
        load_api_key()
        assert os.environ[API_KEY_NAME] == api_key

    def test_missing_file_raises(self, fake_home: Path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_api_key()
        assert "~/.config/openrouter/.env" in str(exc_info.value)
        assert API_KEY_NAME in str(exc_info.value)

    def test_empty_value_raises(self, fake_home: Path):
        path = fake_home / KEY_FILE_RELATIVE
        path.parent.mkdir(parents=True)
        path.write_text(f"{API_KEY_NAME}=\n")

        with pytest.raises(ConfigurationError):
            load_api_key()

    def test_file_without_assignment_raises(self, fake_home: Path):
        path = fake_home / KEY_FILE_RELATIVE
        path.parent.mkdir(parents=True)
        path.write_text("# nothing here\nOTHER_VAR=1\n")

        with pytest.raises(ConfigurationError):
            load_api_key()

    def test_environment_takes_precedence(self, key_file: Path, monkeypatch):
        monkeypatch.setenv(API_KEY_NAME, "sk-or-from-env")
        assert load_api_key() == "sk-or-from-env"

    def test_explicit_path(self, tmp_path: Path, fake_home: Path):
        path = tmp_path / "custom.env"
        path.write_text(f'{API_KEY_NAME}="sk-or-quoted"\n')
        assert load_api_key(path) == "sk-or-quoted"

    def test_explicit_missing_path_named_in_error(self, tmp_path: Path, fake_home: Path):
        path = tmp_path / "absent.env"
        with pytest.raises(ConfigurationError, match="absent.env"):
            load_api_key(path)

    def test_permissions_not_enforced(self, key_file: Path, api_key: str):
        key_file.chmod(0o644)
        assert load_api_key() == api_key


class TestModelRouting:
    """Verify endpoint selection helpers."""

    @pytest.mark.parametrize(
        "model",
        ["openai/dall-e-3", "dall-e-2", "openai/dall-e-3-hd"],
    )
    def test_dalle_models_are_direct(self, model: str):
        assert is_direct_image_model(model) is True

    @pytest.mark.parametrize(
        "model",
        ["google/gemini-2.5-flash-image", "openai/gpt-image-1", "DALL-E-3", ""],
    )
    def test_other_models_use_chat(self, model: str):
        assert is_direct_image_model(model) is False

    def test_endpoints_share_base(self):
        assert ENDPOINTS["images"] == "https://openrouter.ai/api/v1/images/generations"
        assert ENDPOINTS["chat"] == "https://openrouter.ai/api/v1/chat/completions"
