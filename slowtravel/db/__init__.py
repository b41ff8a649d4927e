"""SQLAlchemy plumbing for the ``sql`` storage backend."""
