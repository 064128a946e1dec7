"""Services that orchestrate the domain (consistency engine, persistence)."""
