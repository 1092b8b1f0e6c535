from typing import Optional, List

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.core.exceptions import EmailTakenError
from blog.db.models.user import User as UserModel
from blog.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = UserModel(
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
            updated_at=user.updated_at
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise EmailTakenError("User with this email already exists")

        await self.session.refresh(db_user)
        return self._to_domain(db_user)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Получение пользователя по id"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def update(self, user: User) -> User:
        """Обновление пользователя"""
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values({
                UserModel.email: user.email,
                UserModel.password_hash: user.password_hash,
                UserModel.updated_at: user.updated_at,
            })
        )

        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise EmailTakenError("User with this email already exists")

        return await self.get_by_id(user.id)

    async def delete(self, user_id: int) -> bool:
        """Удаление пользователя"""
        stmt = delete(UserModel).where(UserModel.id == user_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    async def get_all(self) -> List[User]:
        """Получение списка пользователей"""
        result = await self.session.execute(
            select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())
        )
        db_users = result.scalars().all()
        return [self._to_domain(user) for user in db_users]

    async def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Проверка существования email"""
        query = select(UserModel.id).where(UserModel.email == email)
        if exclude_id is not None:
            query = query.where(UserModel.id != exclude_id)

        result = await self.session.execute(query)
        return result.scalar_one_or_none() is not None

    def _to_domain(self, db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            id=db_user.id,
            email=db_user.email,
            password_hash=db_user.password_hash,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
