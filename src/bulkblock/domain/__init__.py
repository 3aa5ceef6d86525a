"""Domain layer: identifiers, expiry, outcomes, and collaborator ports.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
