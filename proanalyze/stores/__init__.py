"""Advisory state persisted between runs."""

from .last_used import LastUsedStore, default_store_path

__all__ = ["LastUsedStore", "default_store_path"]
