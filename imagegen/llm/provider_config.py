"""Provider/runtime configuration for the OpenRouter transport layer.

Architectural role:
    Centralizes endpoint selection, invocation defaults, and credential lookup for
    `imagegen.image.client`, `imagegen.llm.client`, and `imagegen.api.cli`.

Credential flow:
    - The key lives in `~/.config/openrouter/.env` as `OPENROUTER_API_KEY=...`.
    - `load_api_key` loads the file into the process environment via
      `python-dotenv` and returns the value.
    - Owner-only permissions (`chmod 600`) are recommended but never checked.

Determinism:
    Constants are fixed at import time. The home directory is resolved on every
    `load_api_key` call so a changed `HOME` is honored.

Failure behavior:
    A missing or empty credential raises `ConfigurationError`. The message names
    the expected path and never contains key material.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from imagegen.core.errors import ConfigurationError
from imagegen.core.invocation_types import DEFAULT_MODEL, DEFAULT_OUTPUT, DEFAULT_SIZE  # noqa: F401


API_BASE_URL = "https://openrouter.ai/api/v1"

ENDPOINTS = {
    "images": f"{API_BASE_URL}/images/generations",
    "chat": f"{API_BASE_URL}/chat/completions",
}

# Each outbound call is attempted once with this timeout.
REQUEST_TIMEOUT_SECONDS = 120

# Model identifiers containing this marker use the images endpoint.
DIRECT_MODEL_MARKER = "dall-e"

API_KEY_NAME = "OPENROUTER_API_KEY"
KEY_FILE_RELATIVE = Path(".config") / "openrouter" / ".env"
KEY_FILE_DISPLAY = "~/.config/openrouter/.env"


def key_file_path() -> Path:
    """Return the absolute credential file location for the current user."""
    return Path.home() / KEY_FILE_RELATIVE


def load_api_key(path=None) -> str:
    """Load the OpenRouter API key from the secured env file.

    Resolution order:
        1. `OPENROUTER_API_KEY` already present in the process environment.
        2. Assignment in the key file, injected into `os.environ` by dotenv.

    Args:
        path: Optional override of the key file location (defaults to
            `~/.config/openrouter/.env`).

    Returns:
        The non-empty API key string.

    Raises:
        ConfigurationError: When the key is neither in the environment nor in
            the file, or is empty.
    """
    key_file = Path(path) if path is not None else key_file_path()

    if key_file.is_file():
        load_dotenv(dotenv_path=key_file, override=False)

    api_key = (os.getenv(API_KEY_NAME) or "").strip()
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_NAME} not set in {KEY_FILE_DISPLAY if path is None else key_file}"
        )
    return api_key


def is_direct_image_model(model: str) -> bool:
    """Return True when `model` belongs to the direct image-generation family."""
    return DIRECT_MODEL_MARKER in (model or "")
