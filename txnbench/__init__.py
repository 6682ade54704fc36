"""Configuration, schemas, rows, B+ tree and hash indexes, timestamps and statistics for an in-memory transaction test bed."""

__version__ = "0.1.0"

__all__ = [
    "catalog",
    "config",
    "helper",
    "index_btree",
    "index_hash",
    "manager",
    "stats",
    "table",
]