"""Image generation adapter package.

Scope:
    Provides the direct images-endpoint client, response-shape location and
    decoding, and the dispatch service used by the CLI.

Non-goals:
    - No format validation or re-encoding of returned images.
    - No batching; one image per invocation.
"""
