from datetime import datetime, timezone
from typing import Optional

from blog.core.security import get_password_hash, verify_password


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: Optional[int],
        email: str,
        password_hash: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    def update_profile(self, email: Optional[str] = None, password: Optional[str] = None) -> None:
        """Обновление email и/или пароля"""
        if email:
            self.email = email
        if password:
            self.password_hash = get_password_hash(password)
        self.updated_at = datetime.now(timezone.utc)

    @classmethod
    def create_user(cls, email: str, password: str) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            id=None,
            email=email,
            password_hash=get_password_hash(password)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"
