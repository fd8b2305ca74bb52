"""
Feature modules live under this package.

Each module owns its models, service functions, representations and Blueprint,
and reuses the platform primitives (config, DB session, transaction scoping).
"""
