"""
Command-line adapter for imagegen.

Architectural role:
- Parses terminal arguments into `InvocationParams`.
- Loads the OpenRouter credential.
- Delegates generation to `imagegen.image.service.generate_image`.
- Writes the output file and reports progress.

Request lifecycle (one process invocation):
1. Parse argv left-to-right (`--help` short-circuits with exit 0).
2. Validate the prompt (no network on failure).
3. Load `~/.config/openrouter/.env` (no network on failure).
4. Generate, save, and print the saved path and size.

Input validation behavior:
- Only the first non-flag token becomes the prompt.
- A value flag at the end of argv is rejected.
- Whitespace-only prompts count as empty.

Error handling strategy:
- `ImageGenError` subclasses are printed to stderr as `Error: ...` with exit 1.
- Provider error bodies are pretty-printed under `API Error:`.
- Keyboard interrupts exit 1 without a traceback.

Side effects:
- Writes progress to stdout and errors to stderr.
- Writes exactly one output file on success.
"""

import json
import logging
import sys

from imagegen.core.errors import ImageGenError, InputValidationError, ResponseShapeError, TransportError
from imagegen.core.invocation_types import InvocationParams
from imagegen.image.service import generate_image, save_image
from imagegen.llm.provider_config import (
    API_KEY_NAME,
    DEFAULT_MODEL,
    DEFAULT_OUTPUT,
    DEFAULT_SIZE,
    KEY_FILE_DISPLAY,
    is_direct_image_model,
    load_api_key,
)


logger = logging.getLogger(__name__)

USAGE = f"""Usage: imagegen "prompt" [options]
Options:
  --model MODEL   OpenRouter model (default: {DEFAULT_MODEL})
  --output FILE   Output file path (default: {DEFAULT_OUTPUT})
  --size SIZE     Image size for DALL-E models (default: {DEFAULT_SIZE})
  --help          Show this message and exit

Env: {KEY_FILE_DISPLAY} ({API_KEY_NAME})"""

# Flag -> InvocationParams attribute receiving the following token.
VALUE_FLAGS = {
    "--model": "model",
    "--output": "output",
    "--size": "size",
}
HELP_FLAG = "--help"


# =========================================================
# ARGUMENT PARSING
# =========================================================

def parse_args(argv) -> InvocationParams:
    """
    Parse argv tokens sequentially into `InvocationParams`.

    Parsing stops at `--help`; the returned params then have `show_help` set
    and remaining tokens are not inspected.

    Raises:
    - InputValidationError: a value flag has no following token.
    """
    params = InvocationParams()
    tokens = list(argv)
    i = 0

    while i < len(tokens):
        token = tokens[i]

        if token == HELP_FLAG:
            params.show_help = True
            return params

        if token in VALUE_FLAGS:
            if i + 1 >= len(tokens):
                raise InputValidationError(f"option {token} requires a value")
            setattr(params, VALUE_FLAGS[token], tokens[i + 1])
            i += 2
            continue

        if not params.prompt:
            params.prompt = token
        i += 1

    return params


def validate_params(params: InvocationParams) -> None:
    """Reject invocations without a usable prompt."""
    if not params.prompt or not params.prompt.strip():
        raise InputValidationError("provide a prompt as first argument")


# =========================================================
# OUTPUT
# =========================================================

def report_error(err: Exception) -> None:
    """Print an error and any provider diagnostics to stderr."""
    print(f"Error: {err}", file=sys.stderr)

    if isinstance(err, TransportError) and isinstance(err.body, dict):
        print("API Error:", json.dumps(err.body, indent=2), file=sys.stderr)

    if isinstance(err, ResponseShapeError) and err.text_preview is not None:
        print("Text:", err.text_preview, file=sys.stderr)


def _format_kb(size: int) -> str:
    return f"{size / 1024:.1f} KB"


# =========================================================
# MAIN
# =========================================================

def main(argv=None) -> int:
    """
    Run one image generation and return the process exit status.

    Error handling strategy:
    - Validation/configuration failures return 1 before any network call.
    - Transport, response-shape, and decode failures return 1.
    """
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    if argv is None:
        argv = sys.argv[1:]

    try:
        params = parse_args(argv)
        if params.show_help:
            print(USAGE)
            return 0

        validate_params(params)
        api_key = load_api_key()

        print("Generating image...")
        print(f"  Model: {params.model}")
        print(f"  Prompt: {params.prompt}")
        if is_direct_image_model(params.model):
            print(f"  Size: {params.size}")

        result = generate_image(params, api_key)
        out_path = save_image(params.output, result.image)

    except ImageGenError as err:
        report_error(err)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 1

    print(f"\nSaved to {out_path} ({_format_kb(len(result.image))})")
    if result.caption:
        print(f"  Caption: {result.caption}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
