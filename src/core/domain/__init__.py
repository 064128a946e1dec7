"""Domain models and entities.

Why:
- Pure data structures (Pydantic v2), the registry that holds them, and the
  error kinds the Core raises.
- The domain knows nothing about files, the CLI, or the text record format.
"""
