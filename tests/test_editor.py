import asyncio

import pytest

from blog.core.exceptions import (
    ArticleNotFoundError, BlockNotFoundError, LocalValidationError, ServerError,
    SlugConflictError, SubmissionInProgressError
)
from blog.domains.articles.editor import ArticleEditor
from blog.domains.articles.entities import BlockSequence, StoredArticle


class FakeClient:
    """Клиент без сети: запоминает вызовы и возвращает заданный результат"""

    def __init__(self, error=None):
        self.calls = []
        self.error = error
        self.release = None

    async def create_article(self, article, token):
        return await self._handle("create", None, article, token)

    async def update_article(self, article_id, article, token):
        return await self._handle("update", article_id, article, token)

    async def _handle(self, action, article_id, article, token):
        self.calls.append((action, article_id, article, token))
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return StoredArticle(
            id=article_id or 10,
            title=article.title,
            slug=article.slug,
            cover_image=article.cover_image,
            author=article.author,
            blocks=article.blocks.copy(),
        )


def _editor():
    editor = ArticleEditor(title="My Post", cover_image="https://example.com/c.jpg", author="Jane")
    editor.add_block("heading", {"text": "Intro"})
    editor.add_block("paragraph", {"text": "Hello **world**"})
    return editor


def test_build_article_assembles_aggregate_in_insertion_order():
    article = _editor().build_article()

    assert article.slug == "my-post"
    assert len(article.blocks) == 2
    assert [block.type.value for block in article.blocks] == ["heading", "paragraph"]
    assert article.blocks[1].data.text == "Hello **world**"


@pytest.mark.asyncio
async def test_submit_creates_article_with_explicit_token():
    client = FakeClient()
    editor = _editor()

    stored = await editor.submit(client, "secret-token")

    action, article_id, article, token = client.calls[0]
    assert (action, article_id, token) == ("create", None, "secret-token")
    assert article.slug == "my-post"
    assert len(article.blocks) == 2
    assert editor.article_id == stored.id == 10


@pytest.mark.asyncio
async def test_empty_blocks_rejected_without_network_call():
    client = FakeClient()
    editor = ArticleEditor(title="My Post", cover_image="https://example.com/c.jpg", author="Jane")

    with pytest.raises(LocalValidationError):
        await editor.submit(client, "secret-token")

    assert client.calls == []
    assert not editor.is_submitting


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "cover_image", "author"])
async def test_missing_required_field_rejected_locally(field):
    client = FakeClient()
    editor = _editor()
    setattr(editor, field, "  ")

    with pytest.raises(LocalValidationError):
        await editor.submit(client, "secret-token")

    assert client.calls == []


def test_title_without_slug_characters_is_rejected():
    editor = _editor()
    editor.title = "\u0301"

    with pytest.raises(LocalValidationError):
        editor.build_article()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        SlugConflictError("Article with slug 'my-post' already exists", status_code=403),
        ArticleNotFoundError("Article not found", status_code=404),
        ServerError("Internal Server Error", status_code=500),
    ],
)
async def test_failed_submit_keeps_block_sequence(error):
    client = FakeClient(error=error)
    editor = _editor()
    editor.article_id = 3
    before = editor.blocks.copy()

    with pytest.raises(type(error)):
        await editor.submit(client, "secret-token")

    assert editor.blocks == before
    assert editor.article_id == 3
    assert not editor.is_submitting

    # Редактирование продолжается после ошибки
    editor.add_block("subheading", {"text": "More"})
    assert len(editor.blocks) == 3


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_rejected():
    client = FakeClient()
    client.release = asyncio.Event()
    editor = _editor()

    first = asyncio.create_task(editor.submit(client, "secret-token"))
    await asyncio.sleep(0)
    assert editor.is_submitting

    with pytest.raises(SubmissionInProgressError):
        await editor.submit(client, "secret-token")

    client.release.set()
    await first

    assert len(client.calls) == 1
    assert not editor.is_submitting


@pytest.mark.asyncio
async def test_submitted_aggregate_is_detached_from_editor():
    client = FakeClient()
    editor = _editor()

    await editor.submit(client, "secret-token")
    editor.add_block("paragraph", {"text": "after submit"})

    submitted = client.calls[0][2]
    assert len(submitted.blocks) == 2


@pytest.mark.asyncio
async def test_editor_from_stored_takes_update_path():
    stored = StoredArticle(
        id=5,
        title="Old",
        slug="old",
        cover_image="https://example.com/c.jpg",
        author="Jane",
        blocks=BlockSequence.from_raw([{"id": "1", "type": "heading", "data": {"text": "A"}}]),
    )
    client = FakeClient()
    editor = ArticleEditor.from_stored(stored)
    editor.title = "New Title"

    result = await editor.submit(client, "secret-token")

    assert client.calls[0][:2] == ("update", 5)
    assert result.slug == "new-title"
    assert editor.add_block("paragraph").id == "2"


def test_preview_reflects_every_mutation():
    editor = ArticleEditor()
    assert editor.preview().title == "Název článku"
    assert editor.preview().author == "Jméno autora"

    first = editor.add_block("heading", {"text": "One"})
    second = editor.add_block("paragraph", {"text": "Two"})
    assert [block.block_id for block in editor.preview().blocks] == [first.id, second.id]

    editor.reorder(second.id, first.id)
    assert [block.block_id for block in editor.preview().blocks] == [second.id, first.id]

    editor.delete_block(first.id)
    assert [block.block_id for block in editor.preview().blocks] == [second.id]


def test_reorder_with_unknown_id_signals_caller_error():
    editor = _editor()

    with pytest.raises(BlockNotFoundError):
        editor.reorder("1", "missing")
