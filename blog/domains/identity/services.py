import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.exceptions import EmailTakenError
from blog.core.security import create_access_token, verify_token
from blog.db.repositories.user_repository import UserRepository
from blog.domains.identity.entities import User
from blog.domains.identity.schemas import UserCreate, UserLogin, UserUpdate

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    async def create_user(self, user_data: UserCreate) -> User:
        """Создание нового пользователя"""
        if await self.user_repository.email_exists(user_data.email):
            raise EmailTakenError("Email already registered")

        user = User.create_user(email=user_data.email, password=user_data.password)
        created = await self.user_repository.create(user)
        logger.info("Created user %s", created.id)
        return created

    async def authenticate_user(self, login_data: UserLogin) -> Optional[User]:
        """Аутентификация пользователя"""
        user = await self.user_repository.get_by_email(login_data.email)

        if not user or not user.authenticate(login_data.password):
            return None

        return user

    async def login_user(self, login_data: UserLogin) -> Optional[str]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data)

        if not user:
            logger.info("Failed login for %s", login_data.email)
            return None

        token_data = {
            "sub": str(user.id),
            "email": user.email
        }

        return create_access_token(data=token_data)

    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)

        if payload is None:
            return None

        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            return None

        return await self.user_repository.get_by_id(user_id)

    async def list_users(self) -> List[User]:
        """Получение списка пользователей"""
        return await self.user_repository.get_all()

    async def update_user(self, user_id: int, update_data: UserUpdate) -> Optional[User]:
        """Обновление email и/или пароля пользователя"""
        user = await self.user_repository.get_by_id(user_id)

        if not user:
            return None

        if update_data.email and update_data.email != user.email:
            if await self.user_repository.email_exists(update_data.email, exclude_id=user_id):
                raise EmailTakenError("Email already registered")

        user.update_profile(email=update_data.email, password=update_data.password)
        return await self.user_repository.update(user)

    async def delete_user(self, user_id: int) -> Optional[User]:
        """Удаление пользователя, возвращает удаленную запись"""
        user = await self.user_repository.get_by_id(user_id)

        if not user:
            return None

        await self.user_repository.delete(user_id)
        logger.info("Deleted user %s", user_id)
        return user
