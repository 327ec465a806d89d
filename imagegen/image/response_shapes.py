"""Response-shape variants and image-byte resolution.

Processing flow:
    1. The service wraps a direct images-endpoint result, or `locate_chat_image`
       inspects a chat message, producing one `ImageReference`.
    2. `resolve_image_bytes` dispatches on `ImageReference.kind` and returns the
       raw image bytes (base64 decode, data-URI strip + decode, or URL fetch).

Chat message inspection order:
    - `message.images[0]`: string (data URI or bare base64) or object exposing
      `image_url.url` (data URI or external URL).
    - Only when `images` is absent or empty: first `message.content` part with
      `type == "image_url"`.
    - Nothing found: `ResponseShapeError` with a bounded text preview.

Base64 handling:
    Characters outside the base64 alphabet raise `ImageDecodeError`.
    Whitespace, missing padding, and the URL-safe alphabet (`-`, `_`) are
    tolerated.
"""

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Any, Callable

from imagegen.core.errors import ImageDecodeError, ResponseShapeError
from imagegen.core.invocation_types import ImageSourceKind


TEXT_PREVIEW_LIMIT = 300
DATA_URI_PREFIX = "data:"

_WHITESPACE = re.compile(r"\s+")
_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


@dataclass(frozen=True)
class ImageReference:
    """One located image payload.

    Attributes:
        kind: Variant tag selecting the resolution strategy.
        value: Base64 text, data URI, or URL depending on `kind`.
    """

    kind: ImageSourceKind
    value: str


def is_data_uri(value: str) -> bool:
    return value.startswith(DATA_URI_PREFIX)


def decode_base64(payload: str) -> bytes:
    """Decode a bare base64 payload.

    Raises:
        ImageDecodeError: Empty or invalid base64 content.
    """
    cleaned = _WHITESPACE.sub("", payload or "").rstrip("=")
    if not cleaned:
        raise ImageDecodeError("Image payload is empty")
    # URL-safe alphabet and missing padding are accepted.
    cleaned = cleaned.translate(_URLSAFE_TO_STANDARD)
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError(f"Image payload is not valid base64: {exc}") from exc


def decode_data_uri(uri: str) -> bytes:
    """Strip the `data:<media>;base64,` header and decode the remainder.

    Raises:
        ImageDecodeError: Missing comma separator or invalid payload.
    """
    _header, sep, payload = uri.partition(",")
    if not sep:
        raise ImageDecodeError("Data URI has no payload separator")
    return decode_base64(payload)


def resolve_image_bytes(reference: ImageReference, fetch: Callable[[str], bytes]) -> bytes:
    """Return raw image bytes for `reference`.

    Args:
        reference: Located image variant.
        fetch: Callable retrieving bytes for an external URL. Called at most once.

    Returns:
        Image bytes, unmodified beyond decoding.
    """
    kind = reference.kind
    value = reference.value

    if kind in (ImageSourceKind.DIRECT_BINARY, ImageSourceKind.CHAT_INLINE):
        if is_data_uri(value):
            return decode_data_uri(value)
        return decode_base64(value)

    if kind == ImageSourceKind.DIRECT_URL:
        return fetch(value)

    if kind in (ImageSourceKind.CHAT_URL, ImageSourceKind.CHAT_CONTENT_LIST):
        if is_data_uri(value):
            return decode_data_uri(value)
        return fetch(value)

    raise ValueError(f"Unknown image source kind: {kind}")


def _nested_url(entry: Any) -> str | None:
    """Return `entry["image_url"]["url"]` when present and non-empty."""
    if not isinstance(entry, dict):
        return None
    image_url = entry.get("image_url")
    if isinstance(image_url, dict):
        url = image_url.get("url")
        if isinstance(url, str) and url:
            return url
    return None


def text_preview(content: Any, limit: int = TEXT_PREVIEW_LIMIT) -> str | None:
    """Return message content as text truncated to `limit` characters."""
    if content is None:
        return None
    if isinstance(content, str):
        return content[:limit]
    return json.dumps(content)[:limit]


def locate_chat_image(message: dict) -> ImageReference:
    """Find the first image in a chat-completion message.

    Args:
        message: `choices[0].message` object from the chat response.

    Returns:
        `ImageReference` tagged with the chat variant it was found in.

    Raises:
        ResponseShapeError: `images[0]` present but unusable, or no image in
            any recognized location.
    """
    images = message.get("images")
    if isinstance(images, list) and images:
        first = images[0]
        if isinstance(first, str) and first:
            return ImageReference(ImageSourceKind.CHAT_INLINE, first)
        url = _nested_url(first)
        if url:
            return ImageReference(ImageSourceKind.CHAT_URL, url)
        raise ResponseShapeError("Could not decode image from response")

    content = message.get("content")
    if isinstance(content, list):
        for part in content:
            if isinstance(part, dict) and part.get("type") == "image_url":
                url = _nested_url(part)
                if url:
                    return ImageReference(ImageSourceKind.CHAT_CONTENT_LIST, url)

    raise ResponseShapeError(
        "No image found in response.", text_preview=text_preview(content)
    )


def caption_text(message: dict) -> str | None:
    """Return trimmed string content accompanying an image, if any."""
    content = message.get("content")
    if isinstance(content, str) and content.strip():
        return content.strip()
    return None
