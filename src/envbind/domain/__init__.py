"""Domain layer: field kinds, option rules, schema and coercion.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, output, or config.
"""
