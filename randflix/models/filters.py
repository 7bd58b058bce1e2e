"""
Title filters.

A closed set of three inert filter values. They carry no behaviour: each
storage engine interprets them itself (predicates in memory, query clauses
in MongoDB). Multiple filters are always combined by conjunction.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class OnService:
    """Title is available on `service` (entry exists with a non-empty URL).

    An empty service name matches every title.
    """

    service: str = ""


@dataclass(frozen=True, slots=True)
class IsGenre:
    """Title has ALL of `genres` (case-insensitive).

    An empty genre list matches every title.
    """

    genres: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if isinstance(self.genres, str):
            raise TypeError(f"genres must be a sequence of names, not a str: {self.genres!r}")
        # Accept any iterable (lists from query params) but stay hashable
        object.__setattr__(self, "genres", tuple(self.genres))


@dataclass(frozen=True, slots=True)
class ScoreBetween:
    """Title has a `kind` score within [minimum, maximum].

    An empty kind matches every title. A maximum of None means no upper
    bound. A maximum of 0 is also read as "no upper bound"; this legacy
    quirk means a literal ceiling of zero cannot be expressed.
    """

    kind: str = ""
    minimum: int = 0
    maximum: int | None = None

    @property
    def upper_bound(self) -> int | None:
        """Inclusive upper bound, or None when unbounded."""
        if self.maximum is None or self.maximum == 0:
            return None
        return self.maximum


Filter = OnService | IsGenre | ScoreBetween
