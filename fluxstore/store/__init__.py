from .collection import CollectionStore
from .record import Record

__all__ = ("CollectionStore", "Record")
