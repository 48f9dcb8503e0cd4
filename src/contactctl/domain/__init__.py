"""Domain layer — contact model, matching rules, and merge resolution.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
