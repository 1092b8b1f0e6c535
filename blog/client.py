"""HTTP-клиент редактора для сервиса статей.

Токен доступа передается явно в каждый защищенный вызов. Ответы сервера
переводятся в отдельные исключения: конфликт slug, отсутствие статьи,
ошибка валидации, ошибка авторизации и временная ошибка сервера.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from blog.core.exceptions import (
    ArticleNotFoundError, AuthenticationError, RemoteValidationError,
    ServerError, SlugConflictError
)
from blog.domains.articles.entities import ArticleDraft, StoredArticle

logger = logging.getLogger(__name__)


class ArticleClient:
    """Клиент REST API статей"""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def login(self, email: str, password: str) -> str:
        """Вход и получение JWT токена"""
        body = await self._request("POST", "/api/login", json={"email": email, "password": password})
        return body["token"]

    async def create_article(self, article: ArticleDraft, token: str) -> StoredArticle:
        """Создание статьи"""
        body = await self._request("POST", "/create-article", token=token, json=article.to_wire())
        return StoredArticle.from_payload(body["data"])

    async def update_article(self, article_id: int, article: ArticleDraft, token: str) -> StoredArticle:
        """Обновление статьи"""
        body = await self._request(
            "PUT", f"/update-article/{article_id}", token=token, json=article.to_wire()
        )
        return StoredArticle.from_payload(body["data"])

    async def delete_article(self, article_id: int, token: str) -> StoredArticle:
        """Удаление статьи"""
        body = await self._request("DELETE", f"/delete-article/{article_id}", token=token)
        return StoredArticle.from_payload(body["data"])

    async def list_articles(self) -> List[StoredArticle]:
        """Получение всех статей, новые первыми"""
        body = await self._request("GET", "/get-all-articles")
        return [StoredArticle.from_payload(item) for item in body["data"]]

    async def get_article(self, slug: str) -> StoredArticle:
        """Получение статьи по slug"""
        body = await self._request("GET", f"/get-article-data/{slug}")
        return StoredArticle.from_payload(body["data"])

    async def _request(
        self,
        method: str,
        url: str,
        token: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        try:
            response = await self.http.request(method, url, json=json, headers=headers)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ServerError(f"Request failed: {e}") from e

        if response.is_success:
            return response.json()

        message = _error_message(response)
        logger.info("%s %s -> %s: %s", method, url, response.status_code, message)
        raise _error_for_status(response.status_code)(message, status_code=response.status_code)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase


def _error_for_status(status_code: int) -> type:
    if status_code == 401:
        return AuthenticationError
    if status_code == 403:
        return SlugConflictError
    if status_code == 404:
        return ArticleNotFoundError
    if status_code in (400, 422):
        return RemoteValidationError
    return ServerError
