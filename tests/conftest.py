import random

import pytest

from randflix.models.title import Service, Title
from randflix.storage.memory import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    """Empty in-memory storage with a seeded random source."""
    return MemoryStorage(rng=random.Random(1234))


@pytest.fixture
def sample_title() -> Title:
    """The t1 title used across storage and API tests."""
    return Title(
        id="t1",
        name="Arrival",
        year=2016,
        description="A linguist works with the military to talk to aliens.",
        genres=["sci-fi"],
        scores={"metacritic": 80},
        services={"x": Service(url="http://x")},
    )


@pytest.fixture
def catalog() -> list[Title]:
    """A small catalog covering services, genres, and scores."""
    return [
        Title(
            id="a",
            name="Alien",
            genres=["Horror", "Sci-Fi"],
            scores={"metacritic": 89, "imdb": 8},
            services={"netflix": Service(url="https://netflix.com/alien")},
        ),
        Title(
            id="b",
            name="Barbie",
            genres=["Comedy", "Fantasy"],
            scores={"metacritic": 80},
            services={
                "netflix": Service(url=""),
                "prime": Service(url="https://prime.com/barbie"),
            },
        ),
        Title(
            id="c",
            name="Casablanca",
            genres=["drama", "romance"],
            scores={"imdb": 9},
        ),
        Title(
            id="d",
            name="Dune",
            genres=["Sci-Fi", "Drama", "Action"],
            scores={"metacritic": 74, "imdb": 8},
            services={
                "netflix": Service(url="https://netflix.com/dune"),
                "prime": Service(url="https://prime.com/dune"),
            },
        ),
    ]


@pytest.fixture
def filled_storage(storage: MemoryStorage, catalog: list[Title]) -> MemoryStorage:
    """In-memory storage holding the sample catalog."""
    for title in catalog:
        storage.add_title(title)
    return storage
