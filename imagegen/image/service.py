"""Image service dispatcher used by the CLI adapter.

Role in pipeline:
    - Receives validated invocation parameters and the credential.
    - Selects the endpoint convention from the model identifier.
    - Locates the image in whichever response shape is returned.
    - Returns raw bytes (plus optional caption) to the caller.

Endpoint selection:
    - Models containing `dall-e` -> images endpoint, base64 payload requested.
    - All other models -> chat-completion endpoint, image embedded in message.

Fallback policy:
    A direct request rejected because `response_format` is unsupported is retried
    exactly once with `response_format="url"`, followed by one URL fetch. Every
    other exception is propagated unchanged.

Side effects:
    `save_image` performs the single truncate-and-write of the output file.
"""

import logging
from pathlib import Path

from imagegen.core.errors import ImageGenError, ResponseShapeError, TransportError
from imagegen.core.invocation_types import GenerationResult, ImageSourceKind, InvocationParams
from imagegen.image.client import (
    FORMAT_B64,
    FORMAT_URL,
    RESPONSE_FORMAT_FIELD,
    fetch_image_url,
    send_image_request,
)
from imagegen.image.response_shapes import (
    ImageReference,
    caption_text,
    locate_chat_image,
    resolve_image_bytes,
)
from imagegen.llm.client import send_chat_request
from imagegen.llm.provider_config import is_direct_image_model


logger = logging.getLogger(__name__)


def _direct_reference(entry: dict) -> ImageReference:
    """Map an images-endpoint `data[0]` entry to a reference variant."""
    b64 = entry.get("b64_json")
    if isinstance(b64, str) and b64:
        return ImageReference(ImageSourceKind.DIRECT_BINARY, b64)
    url = entry.get("url")
    if isinstance(url, str) and url:
        return ImageReference(ImageSourceKind.DIRECT_URL, url)
    raise ResponseShapeError("Image response entry has neither b64_json nor url")


def generate_direct(params: InvocationParams, api_key: str, fetch=fetch_image_url) -> GenerationResult:
    """Generate through the images endpoint with the base64 -> URL fallback."""
    try:
        entry = send_image_request(
            params.model, params.prompt, params.size, api_key, response_format=FORMAT_B64
        )
    except TransportError as err:
        if not err.mentions(RESPONSE_FORMAT_FIELD):
            raise
        logger.info("Model rejected %s=%s, retrying with %s", RESPONSE_FORMAT_FIELD, FORMAT_B64, FORMAT_URL)
        entry = send_image_request(
            params.model, params.prompt, params.size, api_key, response_format=FORMAT_URL
        )

    reference = _direct_reference(entry)
    return GenerationResult(image=resolve_image_bytes(reference, fetch), kind=reference.kind)


def generate_chat(params: InvocationParams, api_key: str, fetch=fetch_image_url) -> GenerationResult:
    """Generate through the chat-completion endpoint."""
    message = send_chat_request(params.model, params.prompt, api_key)
    reference = locate_chat_image(message)
    logger.debug("Chat image located as %s", reference.kind.value)
    return GenerationResult(
        image=resolve_image_bytes(reference, fetch),
        kind=reference.kind,
        caption=caption_text(message),
    )


def generate_image(params: InvocationParams, api_key: str, fetch=fetch_image_url) -> GenerationResult:
    """Dispatch one generation attempt for `params.model`.

    Args:
        params: Validated invocation parameters.
        api_key: OpenRouter credential.
        fetch: URL downloader, injectable for tests.

    Returns:
        `GenerationResult` holding the image bytes.
    """
    if is_direct_image_model(params.model):
        return generate_direct(params, api_key, fetch=fetch)
    return generate_chat(params, api_key, fetch=fetch)


def save_image(output: str, image: bytes) -> Path:
    """Write `image` verbatim to `output` and return the resolved path."""
    out_path = Path(output).resolve()
    try:
        out_path.write_bytes(image)
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise ImageGenError(f"Could not write {out_path}: {reason}") from exc
    return out_path
