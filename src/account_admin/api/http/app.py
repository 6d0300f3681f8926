"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.account_admin.api.http.app_data import ApplicationDependencies
from src.account_admin.api.http.routers.accounts import router as accounts_router
from src.account_admin.api.http.routers.activity_logs import router as activity_router
from src.account_admin.api.http.routers.health import router as health_router
from src.account_admin.api.http.routers.profile import router as profile_router
from src.account_admin.api.utils.app_startup import configure_logging
from src.account_admin.core.errors import AccountError
from src.account_admin.core.models import OperationResult
from src.account_admin.core.services import (
    DbManageService,
    DbSessionService,
    KeycloakIdentityProvider,
)
from src.account_admin.runtime.context import get_config

# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Account Admin",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

__all__ = ["app", "startup", "shutdown"]

# --- CORS configuration ---
if get_config().app.environment == "production" and (
    "*" in get_config().app.cors.origins
):
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Error envelope ---
@app.exception_handler(AccountError)
async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    result = OperationResult(
        success=False,
        message=exc.message,
        error=exc.detail or exc.message,
        data=(
            {"compensation_failures": [asdict(f) for f in exc.compensation_failures]}
            if exc.compensation_failures
            else None
        ),
    )
    log = logger.bind(status_code=exc.status_code, error_type=type(exc).__name__)
    if exc.status_code >= 500:
        log.error("request.failed: {}", exc)
    else:
        log.info("request.rejected: {}", exc.message)
    return JSONResponse(status_code=exc.status_code, content=result.model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    result = OperationResult(success=False, message=str(exc.detail), error=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=result.model_dump(),
        headers=getattr(exc, "headers", None),
    )


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            result = OperationResult(
                success=False,
                message="Internal Server Error",
                error="Internal Server Error",
            )
            return JSONResponse(
                status_code=500,
                content=result.model_dump(),
                headers={"X-Request-ID": request_id},
            )


# --- Router registration ---
app.include_router(health_router)
app.include_router(accounts_router, prefix="/api/v1")
app.include_router(profile_router, prefix="/api/v1")
app.include_router(activity_router, prefix="/api/v1")


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService()
    DbManageService(database_service.engine).create_all()

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        identity_provider=KeycloakIdentityProvider(config.identity_provider),
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.engine.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
