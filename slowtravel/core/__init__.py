"""
Core utilities shared across the slowtravel store.

This package hosts:
- configuration helpers (env vars, paths, latency, password scheme)
- the error taxonomy raised by store operations
- cross-cutting helpers such as logging setup, cloning, ids and timestamps
"""
