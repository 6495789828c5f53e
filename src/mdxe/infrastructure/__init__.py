"""Infrastructure layer — artifact cache, HTTP session, filesystem.

This layer depends on stdlib, third-party libs (requests), and the
domain error types it raises. It must never import from services,
commands, or output. The service layer bridges between domain models
and infrastructure.
"""
