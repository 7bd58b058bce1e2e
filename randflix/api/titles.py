"""
Title API endpoints.

Provides CRUD operations and paginated listing for titles. Storage failures
(duplicate ID, missing title, backend errors) are raised as KnownError
subclasses and answered by the application's KnownError handler.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from randflix.api.dependencies import get_storage
from randflix.config import DEFAULT_LIST_PAGE_SIZE, MAX_LIST_PAGE_SIZE
from randflix.models.title import Title
from randflix.storage.base import TitleStorage

router = APIRouter(prefix="/title", tags=["titles"])


@router.get("", response_model=list[Title])
def list_titles(
    storage: Annotated[TitleStorage, Depends(get_storage)],
    page_size: Annotated[int, Query(alias="pageSize", ge=0)] = DEFAULT_LIST_PAGE_SIZE,
    page: Annotated[int, Query(ge=0)] = 0,
) -> list[Title]:
    """
    List titles one page at a time, highest ID first.

    Page is zero-indexed. Page sizes above the maximum are clamped.
    """
    page_size = min(page_size, MAX_LIST_PAGE_SIZE)
    return storage.list_titles(page_size, page)


@router.post("", response_model=Title, status_code=status.HTTP_201_CREATED)
def create_title(
    title: Title,
    storage: Annotated[TitleStorage, Depends(get_storage)],
) -> Title:
    """
    Add a new title.

    Returns 409 if a title with the same ID already exists.
    """
    return storage.add_title(title)


@router.get("/{title_id}", response_model=Title)
def get_title(
    title_id: str,
    storage: Annotated[TitleStorage, Depends(get_storage)],
) -> Title:
    """Get a single title by ID."""
    title = storage.get_title(title_id)
    if title is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"no title with id: '{title_id}'",
        )
    return title


@router.put("/{title_id}", response_model=Title)
def update_title(
    title_id: str,
    title: Title,
    storage: Annotated[TitleStorage, Depends(get_storage)],
) -> Title:
    """
    Replace an existing title.

    The body must carry the same ID as the URL. Returns 404 if the
    title does not exist; there is no partial update.
    """
    if title.id != title_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"id mismatch between body ({title.id}) and url ({title_id})",
        )
    return storage.update_title(title)
