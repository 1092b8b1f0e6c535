from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

# Базовый класс для моделей
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Общие поля моделей: числовой id и временные метки.

    Имена колонок времени в нижнем регистре (createdat, updatedat) -
    в таком виде записи отдаются клиенту.
    """
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column("createdat", DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column("updatedat", DateTime(timezone=True), default=utcnow, nullable=False)
