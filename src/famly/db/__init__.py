"""SQLite-backed key-value persistence used by the local store and the session marker."""
