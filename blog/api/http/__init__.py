from blog.api.http.auth import router as auth_router
from blog.api.http.users import router as users_router
from blog.api.http.articles import router as articles_router

__all__ = [
    "auth_router",
    "users_router",
    "articles_router"
]
