"""Infrastructure layer — note stores, persisted state, workspace wiring.

This layer depends on stdlib and third-party libs (httpx) plus the
pure helpers in the domain layer. It must never import from services,
commands, or output.
"""
