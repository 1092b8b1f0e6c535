from blog.db.repositories.user_repository import UserRepository
from blog.db.repositories.article_repository import ArticleRepository

__all__ = [
    "UserRepository",
    "ArticleRepository",
]
