"""Domain layer — specifiers, metadata, mapping tables, and errors.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
