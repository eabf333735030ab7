"""
Warung Kasir API - 메인 애플리케이션
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from kasir.core.config import Settings, settings as default_settings
from kasir.core.exceptions import KasirError
from kasir.core.logging import configure_logging
from kasir.api.v1.api import api_router
from kasir.db.database import Database
from kasir.schemas.common import ErrorResponse, HealthResponse
from kasir.services.file_service import FileStorage
from kasir.services.notification_service import NotificationHub

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Starting Warung Kasir API", version=settings.APP_VERSION)
    logger.info("Initializing database", database_url=settings.DATABASE_URL)

    try:
        app.state.database.create_tables()
        app.state.files.ensure_dir()
    except Exception as e:
        logger.error("Failed to initialize storage", error=str(e))
        raise

    yield

    logger.info("Shutting down Warung Kasir API")
    app.state.database.dispose()


def _error_response(status_code: int, message: str, detail: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(message=message, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """도메인 예외를 공통 오류 응답으로 변환"""

    @app.exception_handler(KasirError)
    async def kasir_error_handler(request: Request, exc: KasirError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, message=exc.message, cause=exc.cause)
        else:
            logger.info("Request rejected", path=request.url.path, message=exc.message)
        return _error_response(exc.status_code, exc.message, exc.cause)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("Invalid request body", path=request.url.path, errors=len(exc.errors()))
        return _error_response(400, "Invalid or incomplete request data", str(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """FastAPI 애플리케이션 생성"""
    settings = settings or default_settings
    configure_logging(settings.DEBUG)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Warung order taking and cashier API",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # 저장소, 파일 저장소, 알림 허브는 앱마다 하나씩
    app.state.settings = settings
    app.state.database = Database(settings.DATABASE_URL)
    app.state.files = FileStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
    app.state.hub = NotificationHub(send_timeout=settings.HUB_SEND_TIMEOUT)

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # 기존 화면은 접두사 없이 호출하므로 루트와 /api/v1 양쪽에 등록
    app.include_router(api_router)
    app.include_router(api_router, prefix="/api/v1")

    app.mount(
        app.state.files.url_prefix,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """헬스 체크 엔드포인트"""
        return HealthResponse(version=settings.APP_VERSION, subscribers=app.state.hub.subscriber_count())

    return app


# 애플리케이션 인스턴스 생성
app = create_application()
