"""OpenRouter access package.

Module split:
    - `provider_config`: endpoints, defaults, and credential loading.
    - `client`: authenticated JSON transport and chat-completion requests.
"""
