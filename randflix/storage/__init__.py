from randflix.storage.base import TitleStorage
from randflix.storage.memory import MemoryStorage
from randflix.storage.mongo import MongoStorage
from randflix.storage.registry import (
    STORAGE_FACTORIES,
    StorageKind,
    create_storage,
    resolve_storage_kind,
    storage_scope,
)

__all__ = [
    "MemoryStorage",
    "MongoStorage",
    "STORAGE_FACTORIES",
    "StorageKind",
    "TitleStorage",
    "create_storage",
    "resolve_storage_kind",
    "storage_scope",
]
