"""
Random title endpoint.

Picks one title uniformly at random among those matching every supplied
criterion: streaming service, genres, and a score range.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from randflix.api.dependencies import get_storage
from randflix.config import DEFAULT_SCORE_KIND
from randflix.models.filters import IsGenre, OnService, ScoreBetween
from randflix.models.title import Title
from randflix.storage.base import TitleStorage

router = APIRouter(prefix="/title", tags=["random"])


@router.get("/random", response_model=Title)
def random_title(
    storage: Annotated[TitleStorage, Depends(get_storage)],
    service: Annotated[str, Query(description="Streaming service the title must be on")] = "",
    genres: Annotated[
        list[str] | None, Query(description="Genres the title must have (all of them)")
    ] = None,
    score_kind: Annotated[str, Query(description="Score kind to range over")] = DEFAULT_SCORE_KIND,
    score_min: Annotated[int, Query(description="Inclusive minimum score")] = 0,
    score_max: Annotated[
        int | None, Query(description="Inclusive maximum score; omitted or 0 is unbounded")
    ] = None,
) -> Title:
    """
    Get a random title matching all criteria.

    Returns 404 if nothing matches.
    """
    title = storage.random_title(
        OnService(service),
        IsGenre(genres or ()),
        ScoreBetween(score_kind, score_min, score_max),
    )
    if title is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No matching title found",
        )
    return title
