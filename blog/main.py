import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog.api.http import auth_router, users_router, articles_router
from blog.core.config import settings
from blog.core.exceptions import InvalidBlocksError
from blog.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Blog",
    description="REST API блога: статьи из блоков, пользователи, аутентификация",
    version="1.0.0"
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Ошибки отдаются в виде {"error": ...}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Ошибки валидации запроса - 400 вместо 422"""
    message = "; ".join(_format_validation_error(error) for error in exc.errors())
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


@app.exception_handler(InvalidBlocksError)
async def invalid_blocks_handler(request: Request, exc: InvalidBlocksError):
    """Поврежденные блоки в сохраненной статье"""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": f"Stored article is corrupted: {exc}"},
    )


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())[1:])
    return f"{location}: {error['msg']}" if location else error["msg"]


# Подключаем роутеры
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(articles_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "Blog API",
        "version": "1.0.0",
        "docs": "/docs"
    }
