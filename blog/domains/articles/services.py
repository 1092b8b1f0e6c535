import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.exceptions import SlugConflictError
from blog.db.repositories.article_repository import ArticleRepository
from blog.domains.articles.entities import StoredArticle
from blog.domains.articles.schemas import ArticleCreate, ArticleUpdate

logger = logging.getLogger(__name__)


class ArticleService:
    """Сервис для работы со статьями"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.article_repository = ArticleRepository(session)

    async def create_article(self, article_data: ArticleCreate) -> StoredArticle:
        """Создание новой статьи"""
        if await self.article_repository.slug_exists(article_data.slug):
            raise SlugConflictError(f"Article with slug '{article_data.slug}' already exists")

        article = await self.article_repository.create(article_data.to_draft())
        logger.info("Created article %s (%s)", article.id, article.slug)
        return article

    async def get_article_by_slug(self, slug: str) -> Optional[StoredArticle]:
        """Получение статьи по slug"""
        return await self.article_repository.get_by_slug(slug)

    async def list_articles(self) -> List[StoredArticle]:
        """Получение всех статей, новые первыми"""
        return await self.article_repository.get_all()

    async def update_article(self, article_id: int, update_data: ArticleUpdate) -> Optional[StoredArticle]:
        """Обновление статьи"""
        article = await self.article_repository.get_by_id(article_id)

        if not article:
            return None

        # Slug должен быть уникален среди остальных статей
        if await self.article_repository.slug_exists(update_data.slug, exclude_id=article_id):
            raise SlugConflictError(f"Article with slug '{update_data.slug}' already exists")

        article.revise(update_data.to_draft())
        updated = await self.article_repository.update(article)
        logger.info("Updated article %s (%s)", updated.id, updated.slug)
        return updated

    async def delete_article(self, article_id: int) -> Optional[StoredArticle]:
        """Удаление статьи, возвращает удаленную запись"""
        article = await self.article_repository.get_by_id(article_id)

        if not article:
            return None

        await self.article_repository.delete(article_id)
        logger.info("Deleted article %s (%s)", article.id, article.slug)
        return article
