"""
Durable key-value backends.

- sqlite_store.py: single-table SQLite store (default)
- json_store.py: one JSON object file, rewritten atomically
"""
