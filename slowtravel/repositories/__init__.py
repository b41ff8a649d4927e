"""
Persistence adapters.

A storage medium is a small key-value interface (``get_item``, ``set_item``,
``remove_item``) holding serialized strings: a JSON file, a SQL table or
process memory. ``BlobStore`` turns one key of a medium into a typed document.
"""
