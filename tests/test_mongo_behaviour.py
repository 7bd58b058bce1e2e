"""
Behaviour tests for the MongoDB engine against an executing backend.

The queries built by MongoStorage run through mongomock's query engine, so
these tests check what the filters actually select rather than the shape of
the documents sent to the driver.
"""

from collections.abc import Iterator

import mongomock
import pytest
from test_memory_storage import _satisfies

from randflix.models.failure import DuplicateTitleError, TitleNotFoundError
from randflix.models.filters import Filter, IsGenre, OnService, ScoreBetween
from randflix.models.title import Service, Title
from randflix.storage.mongo import MongoStorage


@pytest.fixture
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture
def mongo_storage(mongo_client: mongomock.MongoClient) -> Iterator[MongoStorage]:
    """Empty Mongo storage running on an in-process mongomock server."""
    storage = MongoStorage(
        "mongodb://localhost:27017",
        database="randflix_test",
        collection="titles",
        client_factory=lambda uri, **kwargs: mongo_client,
    )
    yield storage
    storage.disconnect()


@pytest.fixture
def filled_mongo_storage(mongo_storage: MongoStorage, catalog: list[Title]) -> MongoStorage:
    """Mongo storage holding the sample catalog."""
    for title in catalog:
        mongo_storage.add_title(title)
    return mongo_storage


class TestCrud:
    def test_get_returns_added_title(self, mongo_storage: MongoStorage, sample_title: Title) -> None:
        mongo_storage.add_title(sample_title)

        assert mongo_storage.get_title("t1") == sample_title

    def test_get_missing_is_none(self, mongo_storage: MongoStorage) -> None:
        assert mongo_storage.get_title("nope") is None

    def test_duplicate_add_keeps_stored_title(
        self, mongo_storage: MongoStorage, sample_title: Title
    ) -> None:
        """A rejected duplicate leaves the first title untouched."""
        mongo_storage.add_title(sample_title)

        with pytest.raises(DuplicateTitleError):
            mongo_storage.add_title(sample_title.model_copy(update={"name": "Other"}))

        assert mongo_storage.get_title("t1").name == "Arrival"  # type: ignore[union-attr]

    def test_update_replaces_title(self, mongo_storage: MongoStorage, sample_title: Title) -> None:
        mongo_storage.add_title(sample_title)

        mongo_storage.update_title(sample_title.model_copy(update={"year": 2017}))

        assert mongo_storage.get_title("t1").year == 2017  # type: ignore[union-attr]

    def test_update_missing_creates_nothing(
        self, mongo_storage: MongoStorage, sample_title: Title
    ) -> None:
        with pytest.raises(TitleNotFoundError):
            mongo_storage.update_title(sample_title)

        assert mongo_storage.get_title("t1") is None


class TestListTitles:
    def test_pages_concatenate_to_whole_store(self, filled_mongo_storage: MongoStorage) -> None:
        """Consecutive pages walk every title once, in descending ID order."""
        pages = [filled_mongo_storage.list_titles(3, page) for page in range(3)]

        assert [[t.id for t in page] for page in pages] == [["d", "c", "b"], ["a"], []]

    def test_page_past_end_is_empty(self, filled_mongo_storage: MongoStorage) -> None:
        assert filled_mongo_storage.list_titles(2, 10) == []

    def test_non_positive_page_size_is_empty(self, filled_mongo_storage: MongoStorage) -> None:
        assert filled_mongo_storage.list_titles(0, 0) == []

    def test_huge_page_size_returns_everything(self, filled_mongo_storage: MongoStorage) -> None:
        titles = filled_mongo_storage.list_titles(2**70, 0)

        assert [t.id for t in titles] == ["d", "c", "b", "a"]


class TestFilterSelection:
    def test_is_genre_is_case_insensitive_superset(self, mongo_storage: MongoStorage) -> None:
        mongo_storage.add_title(Title(id="1", genres=["action", "Drama", "Comedy"]))
        mongo_storage.add_title(Title(id="2", genres=["action"]))

        picks = {mongo_storage.random_title(IsGenre(["Action", "drama"])).id for _ in range(20)}  # type: ignore[union-attr]

        assert picks == {"1"}

    def test_is_genre_is_not_a_substring_match(self, mongo_storage: MongoStorage) -> None:
        mongo_storage.add_title(Title(id="1", genres=["Science Fiction"]))

        assert mongo_storage.random_title(IsGenre(["fiction"])) is None

    def test_on_service_skips_empty_url(self, filled_mongo_storage: MongoStorage) -> None:
        """A service entry with an empty URL does not count as available."""
        picks = {filled_mongo_storage.random_title(OnService("netflix")).id for _ in range(50)}  # type: ignore[union-attr]

        assert picks == {"a", "d"}

    def test_on_service_missing_everywhere(self, filled_mongo_storage: MongoStorage) -> None:
        assert filled_mongo_storage.random_title(OnService("hulu")) is None

    def test_score_max_zero_is_unbounded(self, mongo_storage: MongoStorage) -> None:
        mongo_storage.add_title(Title(id="1", scores={"metacritic": 1_000_000}))

        picked = mongo_storage.random_title(ScoreBetween("metacritic", 10, 0))

        assert picked is not None
        assert picked.id == "1"

    def test_missing_score_is_not_zero(self, mongo_storage: MongoStorage) -> None:
        mongo_storage.add_title(Title(id="1", scores={"imdb": 7}))

        assert mongo_storage.random_title(ScoreBetween("metacritic", 0, 100)) is None


class TestRandomTitle:
    def test_empty_store_is_none(self, mongo_storage: MongoStorage) -> None:
        assert mongo_storage.random_title() is None

    def test_no_filters_reaches_every_title(self, filled_mongo_storage: MongoStorage) -> None:
        picks = {filled_mongo_storage.random_title().id for _ in range(200)}  # type: ignore[union-attr]

        assert picks == {"a", "b", "c", "d"}

    @pytest.mark.parametrize(
        "filters",
        [
            (OnService("netflix"),),
            (OnService("prime"), IsGenre(["sci-fi"])),
            (IsGenre(["DRAMA"]),),
            (ScoreBetween("imdb", 8, 8),),
            (ScoreBetween("metacritic", 75, 0), OnService("netflix")),
            (ScoreBetween("metacritic", 0, 80), IsGenre(["comedy", "fantasy"])),
            (OnService(""), IsGenre([]), ScoreBetween("", 100, 1)),
        ],
    )
    def test_result_satisfies_every_filter(
        self, filled_mongo_storage: MongoStorage, filters: tuple[Filter, ...]
    ) -> None:
        """Any returned title satisfies each filter evaluated on its own."""
        for _ in range(50):
            picked = filled_mongo_storage.random_title(*filters)
            assert picked is not None
            assert all(_satisfies(picked, f) for f in filters)

    def test_end_to_end_scenario(self, mongo_storage: MongoStorage, sample_title: Title) -> None:
        """Add, filter, miss, list, then update a single title."""
        mongo_storage.add_title(sample_title)

        assert mongo_storage.random_title(IsGenre(["Sci-Fi"])) == sample_title
        assert mongo_storage.random_title(IsGenre(["horror"])) is None
        assert mongo_storage.random_title(OnService("x"), ScoreBetween("metacritic", 70, 90)) == (
            sample_title
        )
        assert mongo_storage.list_titles(100, 0) == [sample_title]

        updated = sample_title.model_copy(
            update={"services": {"x": Service(url="http://x/new")}}
        )
        mongo_storage.update_title(updated)

        assert mongo_storage.get_title("t1") == updated
