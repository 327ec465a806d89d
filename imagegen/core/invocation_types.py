"""Invocation data contracts shared by the CLI adapter and the image service.

Architectural role:
    Defines the minimal schema produced by `imagegen.api.cli.parse_args` and the
    result returned by `imagegen.image.service.generate_image`.

Determinism:
    The data classes are purely structural and state-free.
"""

import enum
from dataclasses import dataclass


DEFAULT_MODEL = "google/gemini-2.5-flash-image"
DEFAULT_OUTPUT = "output.png"
DEFAULT_SIZE = "1024x1024"


class ImageSourceKind(enum.Enum):
    """Closed set of locations an image can be resolved from."""

    DIRECT_BINARY = "direct-binary"
    DIRECT_URL = "direct-url"
    CHAT_INLINE = "chat-embedded-inline"
    CHAT_URL = "chat-embedded-url"
    CHAT_CONTENT_LIST = "chat-content-list"


@dataclass
class InvocationParams:
    """Parsed command-line parameters for one run.

    Attributes:
        prompt: Text prompt; empty until a positional token is seen.
        model: Remote model identifier.
        output: Target file path for the image bytes.
        size: `WxH` string, forwarded only to the direct images endpoint.
        show_help: Set when `--help` was encountered.
    """

    prompt: str = ""
    model: str = DEFAULT_MODEL
    output: str = DEFAULT_OUTPUT
    size: str = DEFAULT_SIZE
    show_help: bool = False


@dataclass
class GenerationResult:
    """Image bytes extracted from a provider response.

    Attributes:
        image: Raw bytes to persist verbatim.
        kind: Response shape variant the bytes were resolved from.
        caption: Text returned alongside a chat image, reported but not saved.
    """

    image: bytes
    kind: ImageSourceKind
    caption: str | None = None
