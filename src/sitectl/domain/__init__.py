"""Domain layer — header values, codec, frontmatter model, schema, inference.

This layer depends only on stdlib, pydantic and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
