from datetime import datetime
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blog.domains.articles.entities import ArticleDraft, Block, BlockSequence, StoredArticle
from blog.domains.articles.slug import slugify
from blog.domains.articles.wire import decode_blocks


class TextDataSchema(BaseModel):
    text: str = ""


class ImageDataSchema(BaseModel):
    url: str = ""
    caption: str = ""


class HeadingBlockSchema(BaseModel):
    id: str = Field(..., min_length=1)
    type: Literal["heading"]
    data: TextDataSchema = Field(default_factory=TextDataSchema)


class SubheadingBlockSchema(BaseModel):
    id: str = Field(..., min_length=1)
    type: Literal["subheading"]
    data: TextDataSchema = Field(default_factory=TextDataSchema)


class ParagraphBlockSchema(BaseModel):
    id: str = Field(..., min_length=1)
    type: Literal["paragraph"]
    data: TextDataSchema = Field(default_factory=TextDataSchema)


class ImageBlockSchema(BaseModel):
    id: str = Field(..., min_length=1)
    type: Literal["image"]
    data: ImageDataSchema = Field(default_factory=ImageDataSchema)


BlockSchema = Annotated[
    Union[HeadingBlockSchema, SubheadingBlockSchema, ParagraphBlockSchema, ImageBlockSchema],
    Field(discriminator="type"),
]


class ArticleBase(BaseModel):
    """Статья в форме редактора (camelCase)"""
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(default="", max_length=255)
    cover_image: str = Field(..., alias="coverImage", min_length=1)
    author: str = Field(..., min_length=1, max_length=255)
    blocks: List[BlockSchema] = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('title', 'author', 'cover_image')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be empty')
        return v

    @field_validator('blocks', mode='before')
    @classmethod
    def decode_blocks_field(cls, v):
        # Массив принимается и в виде JSON-строки, хранится всегда массивом
        if isinstance(v, (str, bytes)):
            return decode_blocks(v)
        return v

    @field_validator('blocks')
    @classmethod
    def validate_unique_ids(cls, v):
        ids = [block.id for block in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Block ids must be unique')
        return v

    @model_validator(mode='after')
    def derive_slug(self):
        # Переданный slug приводится к той же форме, что и slug из названия
        self.slug = slugify(self.slug or self.title)
        if not self.slug:
            raise ValueError('Slug cannot be empty')
        return self

    def to_draft(self) -> ArticleDraft:
        return ArticleDraft(
            title=self.title,
            slug=self.slug,
            cover_image=self.cover_image,
            author=self.author,
            blocks=BlockSequence(Block.from_dict(block.model_dump()) for block in self.blocks),
        )


class ArticleCreate(ArticleBase):
    """Схема для создания статьи"""
    pass


class ArticleUpdate(ArticleBase):
    """Схема для обновления статьи"""
    pass


class ArticleResponse(BaseModel):
    """Сохраненная статья (ключи в нижнем регистре)"""
    id: int
    title: str
    slug: str
    coverimage: str
    author: str
    createdat: datetime
    updatedat: datetime
    blocks: List[BlockSchema]

    @classmethod
    def from_entity(cls, article: StoredArticle) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            slug=article.slug,
            coverimage=article.cover_image,
            author=article.author,
            createdat=article.created_at,
            updatedat=article.updated_at,
            blocks=article.blocks.to_list(),
        )
