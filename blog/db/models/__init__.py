from blog.db.base import Base
from blog.db.models.user import User
from blog.db.models.article import Article

__all__ = [
    "Base",
    "User",
    "Article",
]
