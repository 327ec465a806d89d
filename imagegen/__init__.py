"""imagegen: command-line text-to-image client for OpenRouter.

Package layout:
    - `api`: command-line adapter (argument parsing, exit codes, output).
    - `core`: invocation data contracts and the error taxonomy.
    - `image`: images-endpoint client, response-shape resolution, dispatch.
    - `llm`: provider configuration, credential loading, chat transport.
"""

__version__ = "0.1.0"
