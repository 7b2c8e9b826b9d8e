"""Service layer: the schema walker and the CLI-facing services.

Services may import from the domain layer.
They must never import from commands or output.
"""
