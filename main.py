"""
LazyMint Backend

FastAPI entry point mounting the campaign, claim and user routers.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import LazyMintConfig, get_settings
from core.errors import ErrorCode, LazyMintError
from core.logger import setup_service_logger
from core.responses import error_response
from microservices.campaign_service.routes import router as campaign_router
from microservices.claim_service.routes import router as claim_router
from microservices.container import ServiceContainer
from microservices.user_service.routes import router as user_router

SERVICE_VERSION = "1.0.0"

HTTP_STATUS_CODES = {
    status.HTTP_401_UNAUTHORIZED: ErrorCode.AUTH_REQUIRED,
    status.HTTP_403_FORBIDDEN: ErrorCode.PERMISSION_DENIED,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
}


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
    document_store: bool


def create_app(
    container: Optional[ServiceContainer] = None,
    settings: Optional[LazyMintConfig] = None,
) -> FastAPI:
    """
    Build the application.

    With a container the app serves it as-is; otherwise the lifespan builds
    the production container from settings and owns its connections.
    """
    settings = settings or (container.settings if container else get_settings())
    logger = setup_service_logger(settings.service_name, config=settings.logging)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.container is None
        if owned:
            app.state.container = ServiceContainer.from_settings(settings)
        await app.state.container.store.initialize()
        logger.info(f"{settings.service_name} started ({settings.environment})")
        try:
            yield
        finally:
            if owned:
                await app.state.container.store.close()
            logger.info(f"{settings.service_name} stopped")

    app = FastAPI(
        title="LazyMint API",
        description="Claim campaigns: capacity-limited claims, email verification, and tickets",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.container = container

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.services.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LazyMintError)
    async def lazymint_error_handler(request: Request, exc: LazyMintError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: [{exc.code}] {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: [{exc.code}] {exc.message}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
            message = f"{location}: {errors[0].get('msg')}" if location else errors[0].get("msg")
        else:
            message = "Invalid request"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message, "code": ErrorCode.VALIDATION_ERROR},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
        if exc.status_code < 500 and exc.status_code not in HTTP_STATUS_CODES:
            code = ErrorCode.VALIDATION_ERROR
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "code": code},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "code": ErrorCode.INTERNAL_ERROR},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        container: Optional[ServiceContainer] = request.app.state.container
        store_ok = await container.store.health_check() if container else False
        return HealthResponse(
            status="healthy" if store_ok else "degraded",
            service=settings.service_name,
            version=SERVICE_VERSION,
            document_store=store_ok,
        )

    app.include_router(campaign_router)
    app.include_router(claim_router)
    app.include_router(user_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.service_host,
        port=settings.service_port,
        log_level=settings.logging.log_level.lower(),
        access_log=settings.logging.access_log,
    )
