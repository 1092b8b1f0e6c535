"""Исключения домена блога.

Локальные ошибки редактора (валидация, блоки) возникают до любого сетевого
вызова. Ошибки хранилища (конфликт slug, отсутствие статьи, ошибка сервера)
различаются по типу, чтобы редактор мог выбрать способ восстановления.
"""


class BlogError(Exception):
    """Базовое исключение приложения"""


class LocalValidationError(BlogError, ValueError):
    """Статья не прошла локальную проверку перед отправкой"""


class InvalidBlocksError(BlogError, ValueError):
    """Некорректное содержимое последовательности блоков"""


class BlockNotFoundError(BlogError, LookupError):
    """Блок с указанным id отсутствует в последовательности"""


class SubmissionInProgressError(BlogError, RuntimeError):
    """Повторная отправка, пока предыдущая еще выполняется"""


class RemoteError(BlogError):
    """Ошибка, полученная от сервера хранения"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SlugConflictError(RemoteError):
    """Slug уже занят другой статьей"""


class ArticleNotFoundError(RemoteError, LookupError):
    """Статья не найдена"""


class RemoteValidationError(RemoteError):
    """Сервер отклонил данные статьи"""


class AuthenticationError(RemoteError):
    """Токен отсутствует или недействителен"""


class ServerError(RemoteError):
    """Временная ошибка сервера, запрос можно повторить"""


class EmailTakenError(BlogError):
    """Email уже используется другим пользователем"""
