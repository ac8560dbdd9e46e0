"""Core Application Layer: Orchestrates use cases and application logic.

Contains the response-normalization helpers, the read-only tool handlers
built on the request pipeline, and the command handler behind the CLI.
"""
