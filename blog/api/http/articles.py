from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog.api.http.auth import get_current_user
from blog.core.db import get_db
from blog.core.exceptions import SlugConflictError
from blog.core.schemas import DataResponse
from blog.domains.articles.schemas import ArticleCreate, ArticleUpdate, ArticleResponse
from blog.domains.articles.services import ArticleService

router = APIRouter(tags=["articles"])


@router.post(
    "/create-article",
    response_model=DataResponse[ArticleResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_article(
    article_data: ArticleCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    """Создание новой статьи"""
    article_service = ArticleService(db)

    try:
        article = await article_service.create_article(article_data)
    except SlugConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    return DataResponse(data=ArticleResponse.from_entity(article))


@router.get("/get-all-articles", response_model=DataResponse[List[ArticleResponse]])
async def get_all_articles(db: AsyncSession = Depends(get_db)):
    """Получение всех статей"""
    article_service = ArticleService(db)

    articles = await article_service.list_articles()

    return DataResponse(data=[ArticleResponse.from_entity(article) for article in articles])


@router.get("/get-article-data/{slug:path}", response_model=DataResponse[ArticleResponse])
async def get_article_data(
    slug: str,
    db: AsyncSession = Depends(get_db)
):
    """Получение статьи по slug"""
    article_service = ArticleService(db)

    article = await article_service.get_article_by_slug(slug)

    if not article:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Article not found"
        )

    return DataResponse(data=ArticleResponse.from_entity(article))


@router.put("/update-article/{article_id}", response_model=DataResponse[ArticleResponse])
async def update_article(
    article_id: int,
    update_data: ArticleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    """Обновление статьи"""
    article_service = ArticleService(db)

    try:
        article = await article_service.update_article(article_id, update_data)
    except SlugConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    if not article:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Article not found"
        )

    return DataResponse(data=ArticleResponse.from_entity(article))


@router.delete("/delete-article/{article_id}", response_model=DataResponse[ArticleResponse])
async def delete_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user)
):
    """Удаление статьи"""
    article_service = ArticleService(db)

    article = await article_service.delete_article(article_id)

    if not article:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Article not found"
        )

    return DataResponse(data=ArticleResponse.from_entity(article))
