"""Service layer — resolution, fetching, compilation, and CLI-facing services.

Services may import from domain, config models, and infrastructure layers.
They must never import from commands or output.
"""
