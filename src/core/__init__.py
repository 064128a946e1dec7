"""Application core: domain, codec, configuration and services."""
