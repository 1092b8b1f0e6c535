import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from blog.core.exceptions import BlockNotFoundError, InvalidBlocksError
from blog.domains.articles.slug import slugify
from blog.domains.articles.wire import decode_blocks, stored_to_draft_keys

logger = logging.getLogger(__name__)


class BlockType(str, enum.Enum):
    HEADING = "heading"
    SUBHEADING = "subheading"
    PARAGRAPH = "paragraph"
    IMAGE = "image"


@dataclass(frozen=True)
class TextData:
    """Содержимое текстовых блоков (заголовок, подзаголовок, абзац)"""
    text: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TextData":
        return cls(text=_as_text(payload.get("text")))

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text}


@dataclass(frozen=True)
class ImageData:
    """Содержимое блока изображения"""
    url: str = ""
    caption: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ImageData":
        return cls(url=_as_text(payload.get("url")), caption=_as_text(payload.get("caption")))

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "caption": self.caption}


BlockData = Union[TextData, ImageData]

_DATA_CLASSES = {
    BlockType.HEADING: TextData,
    BlockType.SUBHEADING: TextData,
    BlockType.PARAGRAPH: TextData,
    BlockType.IMAGE: ImageData,
}


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Block:
    """Блок содержимого статьи.

    Форма ``data`` определяется типом блока: у текстовых блоков это
    TextData, у изображения ImageData. Поля чужой формы отбрасываются.
    """
    id: str
    type: BlockType
    data: BlockData

    def __post_init__(self):
        expected = _DATA_CLASSES[self.type]
        if not isinstance(self.data, expected):
            raise InvalidBlocksError(
                f"Block '{self.id}' of type '{self.type.value}' requires {expected.__name__}"
            )

    @classmethod
    def create(cls, block_id: str, block_type: Union[BlockType, str], payload: Mapping[str, Any] = None) -> "Block":
        """Создание блока с подмножеством полей, подходящим для типа"""
        try:
            block_type = BlockType(block_type)
        except ValueError:
            raise InvalidBlocksError(f"Unknown block type: {block_type!r}") from None

        data = _DATA_CLASSES[block_type].from_payload(payload or {})
        return cls(id=str(block_id), type=block_type, data=data)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Block":
        data = raw.get("data") or {}
        if not isinstance(data, Mapping):
            raise InvalidBlocksError("Block data must be an object")
        return cls.create(_as_text(raw.get("id")), raw.get("type"), data)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type.value, "data": self.data.to_dict()}

    def same_content(self, other: "Block") -> bool:
        """Сравнение по типу и данным, без учета id"""
        return self.type == other.type and self.data == other.data


class BlockSequence:
    """Упорядоченная последовательность блоков - тело статьи.

    Порядок задается только добавлением в конец и явным перемещением.
    Идентификаторы уникальны в пределах последовательности: новые id
    выдает монотонный счетчик, пропускающий уже занятые значения.
    """

    def __init__(self, blocks: Iterable[Block] = ()):
        self._blocks: List[Block] = []
        self._counter = 0

        for block in blocks:
            if block.id in self.ids() or not block.id:
                fresh_id = self._next_id()
                logger.warning("Duplicate or empty block id %r reassigned to %r", block.id, fresh_id)
                block = Block(id=fresh_id, type=block.type, data=block.data)
            self._blocks.append(block)

    @classmethod
    def from_raw(cls, raw: Any) -> "BlockSequence":
        """Загрузка из массива или JSON-строки с массивом"""
        return cls(Block.from_dict(item) for item in decode_blocks(raw))

    def __iter__(self) -> Iterator[Block]:
        return iter(list(self._blocks))

    def __len__(self) -> int:
        return len(self._blocks)

    def __getitem__(self, index: int) -> Block:
        return self._blocks[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, BlockSequence):
            return False
        return self._blocks == other._blocks

    def __repr__(self) -> str:
        return f"BlockSequence({[block.id for block in self._blocks]})"

    def ids(self) -> List[str]:
        return [block.id for block in self._blocks]

    def index_of(self, block_id: str) -> int:
        for index, block in enumerate(self._blocks):
            if block.id == block_id:
                return index
        raise BlockNotFoundError(f"Block '{block_id}' not found")

    def add(self, block_type: Union[BlockType, str], payload: Mapping[str, Any] = None) -> Block:
        """Добавление блока в конец последовательности"""
        block = Block.create(self._next_id(), block_type, payload)
        self._blocks.append(block)
        return block

    def delete(self, block_id: str) -> bool:
        """Удаление блока; отсутствующий id не меняет последовательность"""
        for index, block in enumerate(self._blocks):
            if block.id == block_id:
                del self._blocks[index]
                return True
        return False

    def reorder(self, source_id: str, target_id: str) -> None:
        """Перемещение блока source_id на позицию, которую занимает target_id"""
        old_index = self.index_of(source_id)
        new_index = self.index_of(target_id)
        if old_index == new_index:
            return

        block = self._blocks.pop(old_index)
        self._blocks.insert(new_index, block)

    def copy(self) -> "BlockSequence":
        clone = BlockSequence(self._blocks)
        clone._counter = self._counter
        return clone

    def same_content(self, other: "BlockSequence") -> bool:
        """Сравнение по типам и данным блоков, без учета id"""
        if len(self) != len(other):
            return False
        return all(a.same_content(b) for a, b in zip(self._blocks, other._blocks))

    def to_list(self) -> List[Dict[str, Any]]:
        return [block.to_dict() for block in self._blocks]

    def _next_id(self) -> str:
        taken = set(self.ids())
        self._counter += 1
        while str(self._counter) in taken:
            self._counter += 1
        return str(self._counter)


@dataclass
class ArticleDraft:
    """Статья в форме редактора, до сохранения (без id и временных меток)"""
    title: str
    slug: str
    cover_image: str
    author: str
    blocks: BlockSequence = field(default_factory=BlockSequence)

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "ArticleDraft":
        """Разбор тела запроса в camelCase"""
        title = _as_text(payload.get("title"))
        return cls(
            title=title,
            slug=_as_text(payload.get("slug")) or slugify(title),
            cover_image=_as_text(payload.get("coverImage")),
            author=_as_text(payload.get("author")),
            blocks=BlockSequence.from_raw(payload.get("blocks")),
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug,
            "coverImage": self.cover_image,
            "author": self.author,
            "blocks": self.blocks.to_list(),
        }


@dataclass
class StoredArticle:
    """Сохраненная статья: числовой id, временные метки, ключи в нижнем регистре"""
    id: int
    title: str
    slug: str
    cover_image: str
    author: str
    blocks: BlockSequence
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "StoredArticle":
        """Разбор записи хранилища; blocks может прийти JSON-строкой"""
        return cls(
            id=int(payload["id"]),
            title=_as_text(payload.get("title")),
            slug=_as_text(payload.get("slug")),
            cover_image=_as_text(payload.get("coverimage")),
            author=_as_text(payload.get("author")),
            blocks=BlockSequence.from_raw(payload.get("blocks")),
            created_at=_parse_timestamp(payload.get("createdat")),
            updated_at=_parse_timestamp(payload.get("updatedat")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "coverimage": self.cover_image,
            "author": self.author,
            "createdat": self.created_at.isoformat() if self.created_at else None,
            "updatedat": self.updated_at.isoformat() if self.updated_at else None,
            "blocks": self.blocks.to_list(),
        }

    def to_draft(self) -> ArticleDraft:
        """Форма редактора для повторного редактирования"""
        return ArticleDraft.from_wire(stored_to_draft_keys(self.to_payload()))

    def revise(self, draft: ArticleDraft) -> None:
        """Применение изменений из редактора, id сохраняется"""
        self.title = draft.title
        self.slug = draft.slug
        self.cover_image = draft.cover_image
        self.author = draft.author
        self.blocks = draft.blocks.copy()
        self.updated_at = datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
