import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

from blog.core.exceptions import LocalValidationError, SubmissionInProgressError
from blog.domains.articles.entities import (
    ArticleDraft, Block, BlockSequence, BlockType, StoredArticle
)
from blog.domains.articles.rendering import (
    AUTHOR_PLACEHOLDER, TITLE_PLACEHOLDER, RenderedArticle, render_article
)
from blog.domains.articles.slug import slugify

if TYPE_CHECKING:
    from blog.client import ArticleClient

logger = logging.getLogger(__name__)


class ArticleEditor:
    """Редактор статьи: метаданные, последовательность блоков и отправка.

    Все изменения синхронны и сразу видны в предпросмотре. Отправка -
    единственная асинхронная операция; пока она выполняется, повторная
    отправка запрещена. Ошибки отправки не меняют последовательность
    блоков, редактирование можно продолжить.
    """

    def __init__(
        self,
        title: str = "",
        cover_image: str = "",
        author: str = "",
        blocks: Iterable[Block] = (),
        article_id: Optional[int] = None,
    ):
        self.title = title
        self.cover_image = cover_image
        self.author = author
        self.blocks = BlockSequence(blocks)
        self.article_id = article_id
        self._submitting = False

    @classmethod
    def from_stored(cls, article: StoredArticle) -> "ArticleEditor":
        """Редактор для изменения уже сохраненной статьи"""
        draft = article.to_draft()
        return cls(
            title=draft.title,
            cover_image=draft.cover_image,
            author=draft.author,
            blocks=draft.blocks,
            article_id=article.id,
        )

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def add_block(self, block_type: Union[BlockType, str], payload: Mapping[str, Any] = None) -> Block:
        return self.blocks.add(block_type, payload)

    def delete_block(self, block_id: str) -> None:
        self.blocks.delete(block_id)

    def reorder(self, source_id: str, target_id: str) -> None:
        self.blocks.reorder(source_id, target_id)

    def preview(self) -> RenderedArticle:
        """Предпросмотр текущего состояния редактора"""
        return render_article(
            ArticleDraft(
                title=self.title or TITLE_PLACEHOLDER,
                slug=slugify(self.title),
                cover_image=self.cover_image,
                author=self.author or AUTHOR_PLACEHOLDER,
                blocks=self.blocks,
            )
        )

    def build_article(self) -> ArticleDraft:
        """Проверка полей и сборка статьи для отправки"""
        missing = [
            name for name, value in (
                ("title", self.title),
                ("coverImage", self.cover_image),
                ("author", self.author),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise LocalValidationError(f"Missing required fields: {', '.join(missing)}")

        if not len(self.blocks):
            raise LocalValidationError("Article must contain at least one block")

        slug = slugify(self.title)
        if not slug:
            raise LocalValidationError("Title does not produce a valid slug")

        return ArticleDraft(
            title=self.title,
            slug=slug,
            cover_image=self.cover_image,
            author=self.author,
            blocks=self.blocks.copy(),
        )

    async def submit(self, client: "ArticleClient", token: str) -> StoredArticle:
        """Отправка статьи: создание или обновление, если id уже известен"""
        if self._submitting:
            raise SubmissionInProgressError("Article submission is already in progress")

        article = self.build_article()

        self._submitting = True
        try:
            if self.article_id is None:
                stored = await client.create_article(article, token)
            else:
                stored = await client.update_article(self.article_id, article, token)
        finally:
            self._submitting = False

        logger.info("Article %s saved with slug %r", stored.id, stored.slug)
        self.article_id = stored.id
        return stored
