"""Domain layer — taxonomy types, identifiers, errors and pure rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
