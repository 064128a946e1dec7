"""Infrastructure adapters (files, exports)."""
