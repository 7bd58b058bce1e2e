from randflix.api.health import router as health_router
from randflix.api.random_title import router as random_router
from randflix.api.titles import router as titles_router

__all__ = [
    "health_router",
    "random_router",
    "titles_router",
]
