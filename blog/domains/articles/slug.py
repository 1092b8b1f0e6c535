import re
import unicodedata

_WHITESPACE_RUN = re.compile(r"\s+")


def slugify(title: str) -> str:
    """Получение slug из названия статьи.

    Название переводится в нижний регистр, диакритика отбрасывается после
    канонической декомпозиции (NFD), пробелы по краям обрезаются, а серии
    пробелов внутри заменяются одним дефисом. Остальные символы сохраняются.

    >>> slugify("Café Déjà Vu")
    'cafe-deja-vu'
    """
    decomposed = unicodedata.normalize("NFD", title.lower())
    base_letters = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE_RUN.sub("-", base_letters.strip())
