"""
RedRelief API server
Builds the FastAPI app, wires the document store and mounts the routers under /api.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from redrelief.config import Settings
from redrelief.database import DocumentStore, MotorDocumentStore
from redrelief.routers import blood_banks, campaigns, inventory, requests, search
from redrelief.services import OperationFailed, ValidationError

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

# Same defaults helmet applies to every response
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}

ENDPOINTS = {
    "health": "GET /api/health",
    "bloodInventory": {
        "getAll": "GET /api/blood-inventory",
        "getById": "GET /api/blood-inventory/:id",
        "create": "POST /api/blood-inventory",
        "update": "PUT /api/blood-inventory/:id",
        "delete": "DELETE /api/blood-inventory/:id",
    },
    "bloodBanks": {
        "getAll": "GET /api/blood-banks",
        "getById": "GET /api/blood-banks/:id",
        "create": "POST /api/blood-banks",
        "update": "PUT /api/blood-banks/:id",
        "delete": "DELETE /api/blood-banks/:id",
        "getInventory": "GET /api/blood-banks/:id/inventory",
    },
    "bloodRequests": {
        "getAll": "GET /api/blood-requests",
        "getById": "GET /api/blood-requests/:id",
        "create": "POST /api/blood-requests",
        "update": "PUT /api/blood-requests/:id",
        "updateStatus": "PATCH /api/blood-requests/:id/status",
        "delete": "DELETE /api/blood-requests/:id",
    },
    "campaigns": {
        "getAll": "GET /api/campaigns",
        "getById": "GET /api/campaigns/:id",
        "create": "POST /api/campaigns",
        "update": "PUT /api/campaigns/:id",
        "updateStatus": "PATCH /api/campaigns/:id/status",
        "delete": "DELETE /api/campaigns/:id",
        "getByBloodBank": "GET /api/campaigns/blood-bank/:bloodBankId",
        "getByCity": "GET /api/campaigns/city/:city",
    },
    "search": {
        "combined": "GET /api/search",
        "byBloodType": "GET /api/search/blood-type/:type",
        "byCity": "GET /api/search/city/:city",
        "availableTypes": "GET /api/search/available-types",
        "cities": "GET /api/search/cities",
    },
}

AVAILABLE_ENDPOINTS = [
    "/api/health",
    "/api/docs",
    "/api/blood-inventory",
    "/api/blood-banks",
    "/api/blood-requests",
    "/api/campaigns",
    "/api/search",
]


def error_body(error: str, **extra) -> dict:
    return {"success": False, "error": error, **extra}


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded for %s on %s", get_remote_address(request), request.url.path)
    return JSONResponse(
        status_code=429,
        content=error_body("Too many requests, please try again later."),
    )


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content=error_body("Invalid request data", details=details))

    @app.exception_handler(OperationFailed)
    async def operation_failed_handler(request: Request, exc: OperationFailed):
        return JSONResponse(status_code=500, content=error_body(exc.message, details=exc.details))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(
                status_code=404,
                content=error_body("API endpoint not found", availableEndpoints=AVAILABLE_ENDPOINTS),
            )
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)), headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("API Error on %s %s", request.method, request.url.path)
        message = str(exc) if settings.is_development else "Internal server error"
        return JSONResponse(status_code=500, content=error_body("Something went wrong!", message=message))


def create_app(store: Optional[DocumentStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API.

    ``store`` is created from ``settings`` on startup when not supplied, and closed on
    shutdown only in that case.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.store is None
        if owned:
            app.state.store = MotorDocumentStore.from_settings(settings)
        logger.info("RedRelief API ready (%s)", settings.environment)
        yield
        if owned:
            await app.state.store.close()

    app = FastAPI(title="RedRelief API", version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    # request counters belong to this app instance
    app.state.limiter = Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    @app.get(f"{API_PREFIX}/health", tags=["Health"])
    async def health():
        return {
            "status": "OK",
            "message": "RedRelief API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.api_version,
        }

    @app.get(f"{API_PREFIX}/docs", tags=["Health"])
    async def api_docs():
        return {
            "message": "RedRelief API Documentation",
            "version": settings.api_version,
            "endpoints": ENDPOINTS,
            "authentication": {
                "required": "Bearer token in Authorization header",
                "example": "Authorization: Bearer <id_token>",
            },
        }

    for module in (inventory, blood_banks, requests, campaigns, search):
        app.include_router(module.router, prefix=API_PREFIX)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 5000))
    uvicorn.run(app, host="0.0.0.0", port=port)
