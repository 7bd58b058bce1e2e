"""
FastAPI dependencies.

The storage instance is created once by the application lifespan and held
on `app.state`. Tests override `get_storage` to inject their own store.
"""

from fastapi import Request

from randflix.storage.base import TitleStorage


def get_storage(request: Request) -> TitleStorage:
    """
    Dependency that provides the active title storage.

    Usage in FastAPI:
        @router.get("/title/{title_id}")
        def get_title(storage: Annotated[TitleStorage, Depends(get_storage)]):
            ...
    """
    storage: TitleStorage = request.app.state.storage
    return storage
