from schoolhub.store.base import RecordStore

__all__ = ["RecordStore"]
