"""
Storage contract.

Every storage engine implements TitleStorage. The contract is identical
across engines:

- Absence on read is None, never an error.
- Writes raise DuplicateTitleError / TitleNotFoundError.
- Callers always receive independent copies of stored titles.
- list_titles orders by descending ID; out-of-range pages are empty.
- random_title picks uniformly among titles matching ALL filters.
"""

from abc import ABC, abstractmethod
from types import TracebackType

from randflix.models.filters import Filter
from randflix.models.title import Title


class TitleStorage(ABC):
    """Backend-agnostic title storage."""

    @abstractmethod
    def add_title(self, title: Title) -> Title:
        """
        Store a new title.

        Raises:
            DuplicateTitleError: If a title with the same ID is stored
        """

    @abstractmethod
    def update_title(self, title: Title) -> Title:
        """
        Replace a stored title wholesale.

        Raises:
            TitleNotFoundError: If no title with this ID is stored
        """

    @abstractmethod
    def get_title(self, title_id: str) -> Title | None:
        """Get a title by ID, or None if absent."""

    @abstractmethod
    def list_titles(self, page_size: int, page: int) -> list[Title]:
        """
        List one page of titles, ordered by descending ID.

        Page is zero-indexed. Pages past the end return an empty list.
        """

    @abstractmethod
    def random_title(self, *filters: Filter) -> Title | None:
        """
        Pick a random title matching every filter.

        Returns None if no title matches.

        Raises:
            UnsupportedFilterError: If a filter cannot be interpreted
        """

    @abstractmethod
    def ping(self) -> bool:
        """Check the backend is reachable."""

    @abstractmethod
    def disconnect(self) -> None:
        """Release held resources. Safe to call more than once."""

    def __enter__(self) -> "TitleStorage":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()


def page_bounds(page_size: int, page: int, total: int) -> tuple[int, int]:
    """
    Compute clamped [start, end) slice bounds for a page.

    Non-positive page sizes and negative pages yield an empty slice.
    """
    if page_size <= 0 or page < 0:
        return 0, 0
    start = min(page * page_size, total)
    end = min((page + 1) * page_size, total)
    return start, end
