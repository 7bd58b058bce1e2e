"""
MongoDB storage engine.

Titles are stored one document per title, keyed by `_id`. Filters are
translated into a `$match` query; random selection uses the server-side
`$sample` stage so no candidate list is ever built client-side.

Every remote call runs under `pymongo.timeout()`. A timeout surfaces as
OperationTimeoutError, any other driver failure as StorageTransportError.

The connection URI may embed credentials. It is used once to build the
client and never stored or logged; diagnostics use `server`, a redacted
form with credentials and query string removed.
"""

import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import pymongo
from pymongo import DESCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from randflix.models.failure import (
    BackendUnavailableError,
    DuplicateTitleError,
    OperationTimeoutError,
    StorageTransportError,
    TitleNotFoundError,
    UnsupportedFilterError,
)
from randflix.models.filters import Filter, IsGenre, OnService, ScoreBetween
from randflix.models.title import Title
from randflix.storage.base import TitleStorage

logger = logging.getLogger(__name__)

Query = dict[str, Any]

DEFAULT_OPERATION_TIMEOUT = 10.0

# Largest integer a BSON int64 can hold
MAX_BSON_INT = 2**63 - 1

# user:password@ between the scheme and the host list
_CREDENTIALS_PATTERN = re.compile(r"(://)[^/@]+@")


# =============================================================================
# URI REDACTION
# =============================================================================


def redact_uri(text: str) -> str:
    """Mask credentials embedded in any connection URI within `text`."""
    return _CREDENTIALS_PATTERN.sub(r"\1*****@", text)


def server_name(uri: str) -> str:
    """Loggable server name: the URI without credentials or query string."""
    return _CREDENTIALS_PATTERN.sub(r"\1", uri).split("?", 1)[0]


# =============================================================================
# FILTER TRANSLATION
# =============================================================================


def _field_path(prefix: str, key: str, title_filter: Filter) -> str:
    """Build a dotted field path, rejecting keys that would change its meaning."""
    if "." in key or key.startswith("$"):
        raise UnsupportedFilterError(
            title_filter, reason=f"'{key}' cannot be used as a field name"
        )
    return f"{prefix}.{key}"


def build_clause(title_filter: Filter) -> Query | None:
    """
    Translate a single filter into a query clause.

    Returns None for filters that match everything.

    Raises:
        UnsupportedFilterError: If the value is not a known filter
    """
    match title_filter:
        case OnService(service=service):
            if not service:
                return None
            path = _field_path("services", service, title_filter) + ".url"
            return {path: {"$exists": True, "$ne": ""}}

        case IsGenre(genres=genres):
            if not genres:
                return None
            # An array field matches a regex when any element matches it
            clauses = [
                {"genres": re.compile(f"^{re.escape(genre)}$", re.IGNORECASE)} for genre in genres
            ]
            return clauses[0] if len(clauses) == 1 else {"$and": clauses}

        case ScoreBetween(kind=kind, minimum=minimum):
            if not kind:
                return None
            path = _field_path("scores", kind, title_filter)
            bounds: Query = {"$gte": minimum}
            if title_filter.upper_bound is not None:
                bounds["$lte"] = title_filter.upper_bound
            return {path: bounds}

        case _:
            raise UnsupportedFilterError(title_filter)


def build_query(filters: tuple[Filter, ...] | list[Filter]) -> Query:
    """Translate filters into a single query matching their conjunction."""
    clauses = [clause for clause in map(build_clause, filters) if clause is not None]
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    # $and keeps clauses on the same field from overwriting each other
    return {"$and": clauses}


# =============================================================================
# DOCUMENT MAPPING
# =============================================================================


def title_to_document(title: Title) -> dict[str, Any]:
    """Convert a Title to a MongoDB document."""
    document = title.model_dump(by_alias=True)
    document["_id"] = document.pop("id")
    return document


def document_to_title(document: dict[str, Any]) -> Title:
    """Convert a MongoDB document to a Title."""
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return Title.model_validate(data)


# =============================================================================
# ENGINE
# =============================================================================


class MongoStorage(TitleStorage):
    """
    Title storage backed by a MongoDB collection.

    The client is shared across all callers; pymongo's client is thread-safe
    and pools its own connections.
    """

    def __init__(
        self,
        uri: str,
        database: str = "randflix",
        collection: str = "titles",
        operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ) -> None:
        """
        Connect to MongoDB and verify the server answers a ping.

        Raises:
            BackendUnavailableError: If the client cannot be created or the
                ping fails within `operation_timeout`
        """
        self.server = server_name(uri)
        self.database = database
        self.collection = collection
        self.operation_timeout = operation_timeout
        self._closed = False

        self._client = self._connect(uri, client_factory)
        self._titles = self._client[database][collection]

        logger.info(
            "Connected to MongoDB %s",
            self.server,
            extra={"database": database, "collection": collection},
        )

    def _connect(self, uri: str, client_factory: Callable[..., MongoClient]) -> MongoClient:
        timeout_ms = int(self.operation_timeout * 1000)
        try:
            client = client_factory(uri, serverSelectionTimeoutMS=timeout_ms)
        except PyMongoError as e:
            raise BackendUnavailableError(self.server, detail=redact_uri(str(e))) from None

        try:
            with pymongo.timeout(self.operation_timeout):
                client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.error("Failed to ping MongoDB %s: %s", self.server, redact_uri(str(e)))
            raise BackendUnavailableError(self.server, detail=redact_uri(str(e))) from None

        return client

    @contextmanager
    def _operation(self, operation: str, title_id: str | None = None) -> Iterator[None]:
        """Run a block as one bounded remote call, translating driver errors."""
        try:
            with pymongo.timeout(self.operation_timeout):
                yield
        except PyMongoError as e:
            if e.timeout:
                logger.warning(
                    "MongoDB operation timed out",
                    extra={"operation": operation, "title_id": title_id},
                )
                raise OperationTimeoutError(
                    operation, self.operation_timeout, title_id=title_id, detail=str(e)
                ) from e
            logger.error(
                "MongoDB operation failed: %s",
                e,
                extra={"operation": operation, "title_id": title_id},
            )
            raise StorageTransportError(operation, title_id=title_id, detail=str(e)) from e

    def add_title(self, title: Title) -> Title:
        with self._operation("add_title", title.id):
            try:
                self._titles.insert_one(title_to_document(title))
            except DuplicateKeyError:
                raise DuplicateTitleError(title.id) from None
        return title.model_copy(deep=True)

    def update_title(self, title: Title) -> Title:
        with self._operation("update_title", title.id):
            result = self._titles.replace_one({"_id": title.id}, title_to_document(title))
        if result.matched_count == 0:
            raise TitleNotFoundError(title.id)
        return title.model_copy(deep=True)

    def get_title(self, title_id: str) -> Title | None:
        with self._operation("get_title", title_id):
            document = self._titles.find_one({"_id": title_id})
        if document is None:
            return None
        return document_to_title(document)

    def list_titles(self, page_size: int, page: int) -> list[Title]:
        # limit(0) means "no limit" to MongoDB
        if page_size <= 0 or page < 0:
            return []
        # Past the largest skip BSON can encode there is nothing to return
        if page * page_size > MAX_BSON_INT:
            return []

        with self._operation("list_titles"):
            cursor = (
                self._titles.find({})
                .sort("_id", DESCENDING)
                .skip(page * page_size)
                .limit(min(page_size, MAX_BSON_INT))
            )
            documents = list(cursor)
        return [document_to_title(document) for document in documents]

    def random_title(self, *filters: Filter) -> Title | None:
        # Translation errors surface before any network call
        query = build_query(filters)
        pipeline = [
            {"$match": query},
            {"$sample": {"size": 1}},
        ]

        with self._operation("random_title"):
            documents = list(self._titles.aggregate(pipeline))
        if not documents:
            return None
        return document_to_title(documents[0])

    def ping(self) -> bool:
        try:
            with self._operation("ping"):
                self._client.admin.command("ping")
        except (OperationTimeoutError, StorageTransportError):
            return False
        return True

    def disconnect(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._client.close()
        logger.info("Disconnected from MongoDB %s", self.server)
