import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.exceptions import InvalidBlocksError, SlugConflictError
from blog.db.models.article import Article as ArticleModel
from blog.domains.articles.entities import ArticleDraft, BlockSequence, StoredArticle

logger = logging.getLogger(__name__)


class ArticleRepository:
    """Репозиторий для работы со статьями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, article: ArticleDraft) -> StoredArticle:
        """Создание новой статьи"""
        db_article = ArticleModel(
            title=article.title,
            slug=article.slug,
            cover_image=article.cover_image,
            author=article.author,
            blocks=article.blocks.to_list(),
        )

        self.session.add(db_article)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise SlugConflictError(f"Article with slug '{article.slug}' already exists")

        await self.session.refresh(db_article)
        return self._to_domain(db_article)

    async def get_by_id(self, article_id: int) -> Optional[StoredArticle]:
        """Получение статьи по id"""
        result = await self.session.execute(
            select(ArticleModel).where(ArticleModel.id == article_id)
        )
        db_article = result.scalar_one_or_none()
        return self._to_domain(db_article) if db_article else None

    async def get_by_slug(self, slug: str) -> Optional[StoredArticle]:
        """Получение статьи по slug"""
        result = await self.session.execute(
            select(ArticleModel).where(ArticleModel.slug == slug)
        )
        db_article = result.scalar_one_or_none()
        return self._to_domain(db_article) if db_article else None

    async def get_all(self) -> List[StoredArticle]:
        """Получение всех статей, новые первыми"""
        result = await self.session.execute(
            select(ArticleModel).order_by(ArticleModel.created_at.desc(), ArticleModel.id.desc())
        )
        articles = []
        for db_article in result.scalars().all():
            try:
                articles.append(self._to_domain(db_article))
            except InvalidBlocksError as e:
                # Запись с поврежденными блоками пропускается
                logger.warning("Skipping article %s with invalid blocks: %s", db_article.id, e)
        return articles

    async def update(self, article: StoredArticle) -> StoredArticle:
        """Обновление статьи"""
        stmt = (
            update(ArticleModel)
            .where(ArticleModel.id == article.id)
            .values({
                ArticleModel.title: article.title,
                ArticleModel.slug: article.slug,
                ArticleModel.cover_image: article.cover_image,
                ArticleModel.author: article.author,
                ArticleModel.blocks: article.blocks.to_list(),
                ArticleModel.updated_at: article.updated_at,
            })
        )

        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise SlugConflictError(f"Article with slug '{article.slug}' already exists")

        return await self.get_by_id(article.id)

    async def delete(self, article_id: int) -> bool:
        """Удаление статьи"""
        stmt = delete(ArticleModel).where(ArticleModel.id == article_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    async def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        """Проверка занятости slug, при обновлении без учета самой статьи"""
        query = select(ArticleModel.id).where(ArticleModel.slug == slug)
        if exclude_id is not None:
            query = query.where(ArticleModel.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    def _to_domain(self, db_article: ArticleModel) -> StoredArticle:
        """Преобразование модели БД в доменную сущность"""
        # Старые записи могут хранить blocks строкой JSON
        return StoredArticle(
            id=db_article.id,
            title=db_article.title,
            slug=db_article.slug,
            cover_image=db_article.cover_image or "",
            author=db_article.author,
            blocks=BlockSequence.from_raw(db_article.blocks),
            created_at=db_article.created_at,
            updated_at=db_article.updated_at,
        )
