"""Caching Service Implementation.

Provides the in-memory TTL cache used by the request pipeline to avoid
redundant upstream calls within a process lifetime.
Bounded Context: Cache Management
"""
