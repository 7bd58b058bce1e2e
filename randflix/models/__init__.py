from randflix.models.failure import (
    BackendUnavailableError,
    DuplicateTitleError,
    FailureDetail,
    FailureKind,
    KnownError,
    OperationTimeoutError,
    StorageError,
    StorageTransportError,
    TitleNotFoundError,
    UnsupportedFilterError,
    UnsupportedStorageKindError,
)
from randflix.models.filters import Filter, IsGenre, OnService, ScoreBetween
from randflix.models.title import Directory, Reference, Service, Title

__all__ = [
    "BackendUnavailableError",
    "Directory",
    "DuplicateTitleError",
    "FailureDetail",
    "FailureKind",
    "Filter",
    "IsGenre",
    "KnownError",
    "OnService",
    "OperationTimeoutError",
    "Reference",
    "ScoreBetween",
    "Service",
    "StorageError",
    "StorageTransportError",
    "Title",
    "TitleNotFoundError",
    "UnsupportedFilterError",
    "UnsupportedStorageKindError",
]
