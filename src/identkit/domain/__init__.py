"""Domain layer — identities, type-name grammar, matching, failures.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, or config.
"""
