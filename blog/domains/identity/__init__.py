from blog.domains.identity.entities import User
from blog.domains.identity.schemas import (
    UserCreate, UserUpdate, UserLogin, UserResponse, Token, TokenStatus
)

__all__ = [
    "User",
    "UserCreate", "UserUpdate", "UserLogin", "UserResponse", "Token", "TokenStatus",
]
