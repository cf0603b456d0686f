import os
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import settings
from database import check_connection
from logging_config import get_logger, setup_logging
from routers import code_pool_router, fees_router, payments_router, reports_router
from services.cache import TTLCache
from services.exceptions import (
    AlreadyAllocated,
    ChecksumMismatch,
    FareSettlementError,
    InvalidCodeFormat,
    OutOfCodesError,
    StorageError,
    TransactionNotFound,
    UnknownBase,
    ValidationError,
)

setup_logging(settings.log_level, settings.log_format)
logger = get_logger(__name__)

# Error type -> HTTP status
ERROR_STATUS = {
    ValidationError: 422,
    InvalidCodeFormat: 422,
    ChecksumMismatch: 400,
    UnknownBase: 400,
    AlreadyAllocated: 409,
    OutOfCodesError: 409,
    TransactionNotFound: 404,
    StorageError: 503,
}


def create_app() -> FastAPI:
    app = FastAPI(title="Fare Settlement API")
    app.state.policy_cache = TTLCache(
        max_entries=settings.policy_cache_max_entries,
        ttl_seconds=settings.policy_cache_ttl_seconds,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(payments_router)
    app.include_router(fees_router)
    app.include_router(code_pool_router)
    app.include_router(reports_router)

    @app.exception_handler(FareSettlementError)
    async def settlement_error_handler(request: Request, exc: FareSettlementError):
        status_code = next(
            (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
            500,
        )
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "error": exc.code, "detail": str(exc)},
        )

    @app.get("/health")
    def health():
        return {
            "ok": True,
            "database": check_connection(),
            "time": datetime.now(timezone.utc).isoformat(),
        }

    # 404 Fallback Middleware
    @app.middleware("http")
    async def not_found_middleware(request: Request, call_next):
        response = await call_next(request)
        # Only for paths that matched no route
        if response.status_code == 404 and request.scope.get("endpoint") is None:
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return response

    return app


app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", settings.port))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
