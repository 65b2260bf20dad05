"""Domain layer — note codec, filing rules, keyword learning, ledger models.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
