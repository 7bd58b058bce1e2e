"""
Storage backend selection.

The configured storage kind is resolved exactly once, at startup, through an
explicit registry of factories. An unknown kind is a fatal configuration
error raised before the application serves any request.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum

from randflix.config import Settings
from randflix.models.failure import UnsupportedStorageKindError
from randflix.storage.base import TitleStorage
from randflix.storage.memory import MemoryStorage
from randflix.storage.mongo import MongoStorage

logger = logging.getLogger(__name__)


class StorageKind(str, Enum):
    """Supported storage backends."""

    MEMORY = "memory"
    MONGO = "mongo"


# Older deployments configure the backend by its store class name
_KIND_ALIASES: dict[str, StorageKind] = {
    "memstore": StorageKind.MEMORY,
    "mongostore": StorageKind.MONGO,
    "mongodb": StorageKind.MONGO,
}

StorageFactory = Callable[[Settings], TitleStorage]


def _create_memory_storage(_settings: Settings) -> TitleStorage:
    return MemoryStorage()


def _create_mongo_storage(settings: Settings) -> TitleStorage:
    return MongoStorage(
        uri=settings.mongo_uri,
        database=settings.mongo_database,
        collection=settings.mongo_collection,
        operation_timeout=settings.mongo_operation_timeout,
    )


STORAGE_FACTORIES: dict[StorageKind, StorageFactory] = {
    StorageKind.MEMORY: _create_memory_storage,
    StorageKind.MONGO: _create_mongo_storage,
}


def resolve_storage_kind(name: str) -> StorageKind:
    """
    Resolve a configured storage kind name (case-insensitive).

    Raises:
        UnsupportedStorageKindError: If the name matches no registered kind
    """
    key = name.strip().lower()
    if key in _KIND_ALIASES:
        return _KIND_ALIASES[key]
    try:
        return StorageKind(key)
    except ValueError:
        raise UnsupportedStorageKindError(
            name, supported=[kind.value for kind in STORAGE_FACTORIES]
        ) from None


def create_storage(settings: Settings) -> TitleStorage:
    """
    Create the storage backend named by `settings.storage_kind`.

    Raises:
        UnsupportedStorageKindError: If the kind is unknown
        BackendUnavailableError: If the backend cannot be reached
    """
    kind = resolve_storage_kind(settings.storage_kind)
    factory = STORAGE_FACTORIES[kind]

    logger.info("Creating storage of kind: %s", kind.value)
    return factory(settings)


@contextmanager
def storage_scope(settings: Settings) -> Iterator[TitleStorage]:
    """
    Open the configured storage for the duration of a block.

    The storage is disconnected on every exit path. If creation itself
    fails there is nothing to release and the error propagates.
    """
    storage = create_storage(settings)
    try:
        yield storage
    finally:
        storage.disconnect()
