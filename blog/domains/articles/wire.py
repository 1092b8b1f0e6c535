"""Преобразование статьи между формой редактора и формой хранилища.

Статья до сохранения передается с ключами в camelCase (``coverImage``),
сохраненная запись приходит с ключами в нижнем регистре (``coverimage``,
``createdat``, ``updatedat``) и числовым ``id``.
"""
import json
from typing import Any, Dict, List, Mapping

from blog.core.exceptions import InvalidBlocksError

# Ключи формы редактора -> ключи сохраненной записи
DRAFT_TO_STORED_KEYS = {
    "title": "title",
    "slug": "slug",
    "coverImage": "coverimage",
    "author": "author",
    "blocks": "blocks",
}
STORED_TO_DRAFT_KEYS = {stored: draft for draft, stored in DRAFT_TO_STORED_KEYS.items()}


def decode_blocks(raw: Any) -> List[Dict[str, Any]]:
    """Декодирование поля blocks: массив или JSON-строка с массивом"""
    if raw is None:
        return []

    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidBlocksError(f"Blocks are not valid UTF-8: {e.reason}") from e

    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidBlocksError(f"Blocks are not valid JSON: {e.msg}") from e

    if not isinstance(raw, list):
        raise InvalidBlocksError("Blocks must be an array")

    for item in raw:
        if not isinstance(item, Mapping):
            raise InvalidBlocksError("Every block must be an object")

    return [dict(item) for item in raw]


def stored_to_draft_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Нижний регистр -> camelCase, служебные поля хранилища отбрасываются"""
    return {
        STORED_TO_DRAFT_KEYS[key]: value
        for key, value in payload.items()
        if key in STORED_TO_DRAFT_KEYS
    }
