"""OpenRouter JSON transport and chat-completion client.

Architectural role:
    Executes authenticated JSON POST requests against OpenRouter endpoints and
    converts HTTP/network failures into `TransportError`. The chat-completion
    call used by chat-style image models lives here; the images endpoint client
    in `imagegen.image.client` reuses `post_json`.

Model invocation flow:
    `image.service.generate_image` -> `send_chat_request(model, prompt, key)`
    -> `post_json` -> parsed response -> `choices[0].message`.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with
    `REQUEST_TIMEOUT_SECONDS`.

Security considerations:
    The `Authorization` header is assembled inside `post_json` only. Error
    messages carry provider response text and status codes, never headers.
"""

import logging
from typing import Any
from urllib.parse import urlparse

import requests

from imagegen.core.errors import ResponseShapeError, TransportError
from imagegen.llm.provider_config import ENDPOINTS, REQUEST_TIMEOUT_SECONDS


logger = logging.getLogger(__name__)


def _parse_body(response: requests.Response) -> Any:
    """Return the JSON body, or raw text when the body is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_fields(body: Any) -> tuple[str | None, str | None, Any]:
    """Extract `(message, param, code)` from an OpenAI-style error body."""
    if not isinstance(body, dict):
        text = body if isinstance(body, str) and body else None
        return text, None, None

    error = body.get("error")
    if isinstance(error, dict):
        return error.get("message"), error.get("param"), error.get("code")
    if isinstance(error, str):
        return error, None, None
    return body.get("message"), None, None


def describe_network_error(err: requests.exceptions.RequestException, url: str) -> str:
    """Name the failure and the remote host without echoing the full URL."""
    host = urlparse(url).hostname or "remote host"
    return f"{err.__class__.__name__} while contacting {host}"


def build_transport_error(label: str, status_code: int | None, body: Any) -> TransportError:
    """Build a `TransportError` from a failed response body."""
    message, param, code = _error_fields(body)
    summary = f"{label} failed"
    if status_code is not None:
        summary += f" with status {status_code}"
    if message:
        summary += f": {message}"
    return TransportError(
        summary,
        status_code=status_code,
        error_message=message,
        error_param=param,
        error_code=code,
        body=body,
    )


def post_json(url: str, payload: dict, api_key: str, label: str) -> dict:
    """POST `payload` to `url` with bearer authentication.

    Args:
        url: Absolute endpoint URL.
        payload: JSON request body.
        api_key: OpenRouter credential.
        label: Human-readable request name used in error messages.

    Returns:
        Parsed JSON object.

    Raises:
        TransportError: Network failure, non-2xx status, or an `error` object
            returned in place of a result.
        ResponseShapeError: Success status with a non-object body.
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(
            url,
            headers=headers,
            json=payload,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as err:
        raise TransportError(f"{label} failed: {describe_network_error(err, url)}") from err

    body = _parse_body(response)
    logger.debug("%s -> HTTP %s", label, response.status_code)

    if not response.ok:
        raise build_transport_error(label, response.status_code, body)

    if not isinstance(body, dict):
        raise ResponseShapeError(f"{label} returned a non-JSON body")

    if "error" in body and not any(key in body for key in ("choices", "data")):
        raise build_transport_error(label, response.status_code, body)

    return body


def send_chat_request(model: str, prompt: str, api_key: str) -> dict:
    """Send one user-role chat completion and return `choices[0].message`.

    Raises:
        TransportError: Request or status failure.
        ResponseShapeError: Response has no message object.
    """
    payload = {
        "model": model,
        "messages": [
            {"role": "user", "content": prompt},
        ],
    }

    logger.debug("Requesting chat completion for model=%s", model)
    data = post_json(ENDPOINTS["chat"], payload, api_key, label="Chat request")

    choices = data.get("choices")
    message = None
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message")

    if not isinstance(message, dict):
        raise ResponseShapeError("No message in response")

    return message
