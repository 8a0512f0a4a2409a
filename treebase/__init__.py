"""An in-memory table store with a SQL-like query language."""

__version__ = "0.1.0"
__all__ = ["avltree", "btree", "cli", "database", "minheap", "query"]