"""
In-memory storage engine.

Titles live in a dict owned by the MemoryStorage instance. A single lock
serialises every operation, reads included, so no caller can observe a
title mid-write. Lock acquisition has no timeout.

Filters are interpreted as predicates over a Title and evaluated directly.
"""

import logging
import random
from collections.abc import Callable, Iterable
from threading import Lock

from randflix.models.failure import (
    DuplicateTitleError,
    TitleNotFoundError,
    UnsupportedFilterError,
)
from randflix.models.filters import Filter, IsGenre, OnService, ScoreBetween
from randflix.models.title import Title
from randflix.storage.base import TitleStorage, page_bounds

logger = logging.getLogger(__name__)

TitlePredicate = Callable[[Title], bool]


def _match_all(_title: Title) -> bool:
    return True


def on_service(service: str) -> TitlePredicate:
    """Predicate: title has a non-empty URL for `service`."""
    if not service:
        return _match_all

    def predicate(title: Title) -> bool:
        entry = title.services.get(service)
        return entry is not None and entry.url != ""

    return predicate


def is_genre(genres: Iterable[str]) -> TitlePredicate:
    """Predicate: title has every genre in `genres`, ignoring case."""
    wanted = {genre.lower() for genre in genres}
    if not wanted:
        return _match_all

    def predicate(title: Title) -> bool:
        have = {genre.lower() for genre in title.genres}
        return wanted <= have

    return predicate


def score_between(kind: str, minimum: int, maximum: int | None) -> TitlePredicate:
    """Predicate: title has a `kind` score in [minimum, maximum].

    A maximum of None is unbounded. Titles without a `kind` score never match.
    """
    if not kind:
        return _match_all

    def predicate(title: Title) -> bool:
        score = title.scores.get(kind)
        if score is None:
            return False
        if score < minimum:
            return False
        return maximum is None or score <= maximum

    return predicate


def build_predicate(title_filter: Filter) -> TitlePredicate:
    """
    Interpret a single filter as a predicate.

    Raises:
        UnsupportedFilterError: If the value is not a known filter
    """
    match title_filter:
        case OnService(service=service):
            return on_service(service)
        case IsGenre(genres=genres):
            return is_genre(genres)
        case ScoreBetween(kind=kind, minimum=minimum):
            return score_between(kind, minimum, title_filter.upper_bound)
        case _:
            raise UnsupportedFilterError(title_filter)


class MemoryStorage(TitleStorage):
    """
    Thread-safe in-memory title storage.

    Stored titles are private copies; every returned title is a fresh copy.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._titles: dict[str, Title] = {}
        self._lock = Lock()
        # Defaults to the process-wide random source
        self._choice = rng.choice if rng is not None else random.choice

    def add_title(self, title: Title) -> Title:
        with self._lock:
            if title.id in self._titles:
                raise DuplicateTitleError(title.id)
            self._titles[title.id] = title.model_copy(deep=True)
            logger.debug("Added title %s", title.id)
            return self._titles[title.id].model_copy(deep=True)

    def update_title(self, title: Title) -> Title:
        with self._lock:
            if title.id not in self._titles:
                raise TitleNotFoundError(title.id)
            self._titles[title.id] = title.model_copy(deep=True)
            logger.debug("Updated title %s", title.id)
            return self._titles[title.id].model_copy(deep=True)

    def get_title(self, title_id: str) -> Title | None:
        with self._lock:
            stored = self._titles.get(title_id)
            return stored.model_copy(deep=True) if stored is not None else None

    def list_titles(self, page_size: int, page: int) -> list[Title]:
        with self._lock:
            titles = sorted(self._titles.values(), key=lambda t: t.id, reverse=True)
            start, end = page_bounds(page_size, page, len(titles))
            return [t.model_copy(deep=True) for t in titles[start:end]]

    def random_title(self, *filters: Filter) -> Title | None:
        # Interpret every filter before looking at any title
        predicates = [build_predicate(f) for f in filters]

        with self._lock:
            candidates = [
                title
                for title in self._titles.values()
                if all(predicate(title) for predicate in predicates)
            ]
            if not candidates:
                return None
            return self._choice(candidates).model_copy(deep=True)

    def ping(self) -> bool:
        return True

    def disconnect(self) -> None:
        """Nothing to release for in-memory storage."""
