from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


def _validate_password(v):
    if not v.strip():
        raise ValueError('Password cannot be empty')
    return v


class UserCreate(BaseModel):
    """Схема для создания пользователя"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _validate_password(v)


class UserUpdate(BaseModel):
    """Схема для обновления пользователя"""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if v is None:
            return v
        return _validate_password(v)


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Схема для ответа с данными пользователя"""
    id: int
    email: str
    createdat: datetime
    updatedat: datetime

    @classmethod
    def from_entity(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            createdat=user.created_at,
            updatedat=user.updated_at,
        )


class Token(BaseModel):
    """Схема для JWT токена"""
    token: str
    token_type: str = "bearer"


class TokenStatus(BaseModel):
    """Результат проверки токена"""
    valid: bool
    user: UserResponse
