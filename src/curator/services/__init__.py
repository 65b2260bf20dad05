"""Service layer — filing, undo, learning, capture; all return ServiceResult.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
