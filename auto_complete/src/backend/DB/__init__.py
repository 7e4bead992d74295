from .api import WordStore, make_store

__all__ = ["WordStore", "make_store"]
