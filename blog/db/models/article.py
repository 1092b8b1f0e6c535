from sqlalchemy import Column, String, Text, JSON
from sqlalchemy.dialects.postgresql import JSONB

from blog.db.base import BaseModel


class Article(BaseModel):
    __tablename__ = "articles"

    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    cover_image = Column("coverimage", Text, nullable=False, default="")
    author = Column(String(255), nullable=False)
    # Массив блоков хранится как JSON-массив, не как строка
    blocks = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)
