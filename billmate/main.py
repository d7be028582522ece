"""FastAPI Application Entry Point"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from billmate.api.v1.router import api_router
from billmate.config import settings
from billmate.core.exceptions import BillMateError
from billmate.core.logging import get_logger, setup_logging
from billmate.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware
from billmate.core.rate_limit import limiter
from billmate.database import Database
from billmate.schemas.responses import ErrorDetail, ErrorResponse

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    database: Database = app.state.database
    logger.info("Starting application", extra={"environment": settings.ENVIRONMENT})

    if not database.is_initialized:
        database.init()
    # Development only - production schemas come from Alembic
    if settings.is_development:
        await database.create_all()
        logger.info("Database tables created")

    yield

    logger.info("Shutting down application")
    await database.shutdown()


async def domain_exception_handler(request: Request, exc: BillMateError):
    logger.info(
        "Request rejected",
        extra={
            "path": request.url.path,
            "code": exc.code,
            "correlation_id": getattr(request.state, "request_id", None),
        },
    )
    body = ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "Validation error",
        extra={
            "path": request.url.path,
            "errors": jsonable_encoder(exc.errors()),
            "correlation_id": getattr(request.state, "request_id", None),
        },
    )
    body = ErrorResponse(
        error=ErrorDetail(
            code="VALIDATION_ERROR",
            message="ข้อมูลไม่ถูกต้อง",
            details=jsonable_encoder(exc.errors()),
        )
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "correlation_id": getattr(request.state, "request_id", None),
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    ``database`` defaults to one built from settings; the lifespan initialises
    it unless the caller already has.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Rental billing, payment verification and tenant notifications",
        # Interactive docs are off in production
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database or Database()

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=settings.ALLOWED_METHODS,
        allow_headers=[settings.ALLOWED_HEADERS],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(BillMateError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "billmate.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
