"""Core contracts package.

Composition:
    - `errors`: exception hierarchy for one invocation.
    - `invocation_types`: parsed parameters and generation result schemas.

Package import itself is side-effect free.
"""
