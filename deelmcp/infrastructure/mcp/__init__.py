"""Exposes the tool registry over the Model Context Protocol (stdio)."""
