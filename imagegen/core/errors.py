"""Error taxonomy for one image-generation invocation.

Every error is terminal for the current run. The CLI boundary catches
`ImageGenError`, prints the message to stderr, and exits non-zero. No message
produced here may contain the API credential.
"""

from typing import Any


class ImageGenError(RuntimeError):
    """Base class for all expected failures of an invocation."""


class ConfigurationError(ImageGenError):
    """Credential file missing, unreadable, or without a usable key."""


class InputValidationError(ImageGenError):
    """Invalid command-line input (missing prompt, flag without value)."""


class TransportError(ImageGenError):
    """Network failure or non-success HTTP status from a remote endpoint.

    Attributes:
        status_code: HTTP status when a response was received, else `None`.
        error_message: Provider error text extracted from the JSON body.
        error_param: Provider `error.param` field, when exposed.
        error_code: Provider `error.code` field, when exposed.
        body: Parsed JSON body (or raw text) of the failed response.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_message: str | None = None,
        error_param: str | None = None,
        error_code: Any = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_message = error_message
        self.error_param = error_param
        self.error_code = error_code
        self.body = body

    def mentions(self, field: str) -> bool:
        """Return True when the provider error refers to `field`.

        The structured `param` field is checked first. Matching on the message
        text is a fallback that depends on provider wording.
        """
        if self.error_param == field:
            return True
        return isinstance(self.error_message, str) and field in self.error_message


class ResponseShapeError(ImageGenError):
    """Response lacks the expected fields or contains no locatable image.

    Attributes:
        text_preview: Truncated textual content of the response, if any.
    """

    def __init__(self, message: str, text_preview: str | None = None) -> None:
        super().__init__(message)
        self.text_preview = text_preview


class ImageDecodeError(ImageGenError):
    """Payload present but not valid base64 / data URI content."""
