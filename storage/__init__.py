from storage.db import PersistenceError, Storage

__all__ = ["PersistenceError", "Storage"]
