from blog.domains.articles.entities import (
    BlockType, TextData, ImageData, Block, BlockSequence, ArticleDraft, StoredArticle
)
from blog.domains.articles.slug import slugify
from blog.domains.articles.rendering import RenderedArticle, RenderedBlock, render_article
from blog.domains.articles.editor import ArticleEditor

__all__ = [
    "BlockType", "TextData", "ImageData", "Block", "BlockSequence",
    "ArticleDraft", "StoredArticle",
    "slugify",
    "RenderedArticle", "RenderedBlock", "render_article",
    "ArticleEditor",
]
