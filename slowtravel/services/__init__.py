"""
High-level use cases of the slowtravel store.

Each service module orchestrates a storage medium and the domain helpers to
implement business rules (save a route, plan a trip, register, log in).
Callers should use these services instead of touching stored documents.
"""
