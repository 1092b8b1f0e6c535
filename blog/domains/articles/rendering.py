"""Отображение статьи: одно правило на каждый тип блока.

Текст абзацев понимает облегченную разметку (жирный, курсив, ссылки).
Все остальное, включая HTML и ссылки с недопустимой схемой, выводится
как экранированный текст.
"""
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from markupsafe import Markup, escape

from blog.domains.articles.entities import (
    ArticleDraft, Block, BlockSequence, BlockType, StoredArticle
)

HEADING_PLACEHOLDER = "Nadpis"
SUBHEADING_PLACEHOLDER = "Podnadpis"
IMAGE_ALT_PLACEHOLDER = "Obrázek"
TITLE_PLACEHOLDER = "Název článku"
AUTHOR_PLACEHOLDER = "Jméno autora"

LINK_CLASS = "text-blue-500 underline"
SAFE_LINK_SCHEMES = {"http", "https", "mailto", ""}

_INLINE = re.compile(
    r"\[(?P<label>[^\]\n]+)\]\((?P<href>[^)\s]+)\)"
    r"|\*\*(?P<bold>.+?)\*\*"
    r"|__(?P<bold_alt>.+?)__"
    r"|\*(?P<italic>[^*\s][^*]*?)\*"
    r"|\b_(?P<italic_alt>[^_\s][^_]*?)_\b"
)
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


@dataclass(frozen=True)
class RenderedBlock:
    block_id: str
    type: BlockType
    html: Markup


@dataclass(frozen=True)
class RenderedArticle:
    title: str
    cover_image: str
    author: str
    blocks: Tuple[RenderedBlock, ...]

    def to_html(self) -> Markup:
        """Сборка статьи в один HTML-фрагмент"""
        parts = [Markup("<h1>{}</h1>").format(self.title)]
        if self.cover_image:
            parts.append(Markup('<img src="{}" alt="{}">').format(self.cover_image, self.title))
        parts.append(Markup("<p>Autor: {}</p>").format(self.author))
        parts.extend(block.html for block in self.blocks)
        return Markup("\n").join(parts)


def is_safe_href(href: str) -> bool:
    """Ссылка допустима только для http(s), mailto и относительных адресов"""
    if href.startswith("//"):
        return False
    try:
        scheme = urlparse(href).scheme.lower()
    except ValueError:
        return False
    return scheme in SAFE_LINK_SCHEMES


def render_markup(text: str) -> Markup:
    """Разбор строчной разметки с экранированием всего остального"""
    parts = []
    position = 0

    for match in _INLINE.finditer(text):
        parts.append(escape(text[position:match.start()]))
        parts.append(_render_inline(match))
        position = match.end()

    parts.append(escape(text[position:]))
    return Markup("").join(parts)


def _render_inline(match: "re.Match[str]") -> Markup:
    if match.group("href") is not None:
        href = match.group("href")
        if not is_safe_href(href):
            return escape(match.group(0))
        return Markup('<a href="{}" class="{}">{}</a>').format(
            href, LINK_CLASS, render_markup(match.group("label"))
        )

    bold = match.group("bold") or match.group("bold_alt")
    if bold is not None:
        return Markup("<strong>{}</strong>").format(render_markup(bold))

    italic = match.group("italic") or match.group("italic_alt")
    return Markup("<em>{}</em>").format(render_markup(italic))


def render_paragraph(text: str) -> Markup:
    chunks = [chunk.strip() for chunk in _PARAGRAPH_BREAK.split(text) if chunk.strip()]
    paragraphs = [
        Markup("<p>{}</p>").format(Markup("<br>").join(render_markup(line) for line in chunk.splitlines()))
        for chunk in chunks
    ]
    return Markup('<div class="prose">{}</div>').format(Markup("").join(paragraphs))


def render_block(block: Block) -> Optional[RenderedBlock]:
    """Отображение одного блока; изображение без url не отображается"""
    if block.type == BlockType.HEADING:
        html = Markup("<h2>{}</h2>").format(block.data.text.strip() or HEADING_PLACEHOLDER)
    elif block.type == BlockType.SUBHEADING:
        html = Markup("<h3>{}</h3>").format(block.data.text.strip() or SUBHEADING_PLACEHOLDER)
    elif block.type == BlockType.PARAGRAPH:
        html = render_paragraph(block.data.text)
    elif block.type == BlockType.IMAGE:
        if not block.data.url:
            return None
        html = Markup('<img src="{}" alt="{}">').format(
            block.data.url, block.data.caption or IMAGE_ALT_PLACEHOLDER
        )
    else:
        raise ValueError(f"Unsupported block type: {block.type}")

    return RenderedBlock(block_id=block.id, type=block.type, html=html)


def render_blocks(blocks: Union[BlockSequence, Any]) -> Tuple[RenderedBlock, ...]:
    if not isinstance(blocks, BlockSequence):
        blocks = BlockSequence.from_raw(blocks)
    rendered = (render_block(block) for block in blocks)
    return tuple(block for block in rendered if block is not None)


def render_article(article: Union[StoredArticle, ArticleDraft, Mapping[str, Any]]) -> RenderedArticle:
    """Отображение статьи.

    Принимает сохраненную статью, черновик редактора или сырой ответ
    сервера. Поле blocks в сыром ответе может быть массивом или
    JSON-строкой - результат в обоих случаях одинаков. Статья не
    изменяется.
    """
    if isinstance(article, Mapping):
        if "id" in article:
            article = StoredArticle.from_payload(article)
        else:
            article = ArticleDraft.from_wire(article)

    return RenderedArticle(
        title=article.title,
        cover_image=article.cover_image,
        author=article.author,
        blocks=render_blocks(article.blocks),
    )
