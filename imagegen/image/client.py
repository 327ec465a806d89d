"""Direct image-generation client and external image fetcher.

Processing flow:
    1. Build the images-endpoint payload (`model`, `prompt`, `n`, `size`,
       `response_format`).
    2. Submit via the shared authenticated JSON transport.
    3. Return the first `data[]` entry unchanged.

External fetches:
    `fetch_image_url` downloads a provider-hosted image with a plain GET. No
    credentials are attached to this request.

Error handling strategy:
    Misconfigured responses and HTTP failures raise exceptions for upstream
    handling. Nothing is retried here; the base64 -> URL fallback is decided by
    `imagegen.image.service`.
"""

import logging

import requests

from imagegen.core.errors import ResponseShapeError, TransportError
from imagegen.llm.client import describe_network_error, post_json
from imagegen.llm.provider_config import ENDPOINTS, REQUEST_TIMEOUT_SECONDS


logger = logging.getLogger(__name__)

RESPONSE_FORMAT_FIELD = "response_format"
FORMAT_B64 = "b64_json"
FORMAT_URL = "url"


def send_image_request(
    model: str,
    prompt: str,
    size: str,
    api_key: str,
    response_format: str = FORMAT_B64,
) -> dict:
    """Request one image from the direct image-generation endpoint.

    Args:
        model: Image model identifier.
        prompt: Text prompt.
        size: `WxH` size string.
        api_key: OpenRouter credential.
        response_format: `b64_json` or `url`.

    Returns:
        First `data[]` entry (contains `b64_json` or `url`).

    Error handling:
        - Transport/status failures -> `TransportError`
        - Missing `data[0]` -> `ResponseShapeError`
    """
    payload = {
        "model": model,
        "prompt": prompt,
        "n": 1,
        "size": size,
        RESPONSE_FORMAT_FIELD: response_format,
    }

    logger.debug("Requesting image model=%s size=%s format=%s", model, size, response_format)
    data = post_json(ENDPOINTS["images"], payload, api_key, label="Image request")

    entries = data.get("data")
    if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
        raise ResponseShapeError("Image response contained no data entries")

    return entries[0]


def fetch_image_url(url: str) -> bytes:
    """Download image bytes from an external URL.

    Raises:
        TransportError: Network failure or non-success status.
    """
    logger.debug("Fetching image from external URL")
    try:
        response = requests.get(url, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.exceptions.RequestException as err:
        raise TransportError(f"Image download failed: {describe_network_error(err, url)}") from err

    if not response.ok:
        raise TransportError(
            f"Image download failed with status {response.status_code}",
            status_code=response.status_code,
        )

    return response.content
