"""
Banking API: FastAPI Application.

This is the entry point for the application. All routers and
the error boundary are registered here.

Error boundary: classified errors keep their status and
message; everything else is logged with its traceback and
answered with a generic 500 so no internal detail leaks.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from banking_api.config import get_settings
from banking_api.errors import BankingError, InternalError
from banking_api.logging_config import setup_logging, get_logger
from banking_api.models.base import get_store
from banking_api.api.health import router as health_router
from banking_api.api.auth import router as auth_router
from banking_api.api.accounts import router as accounts_router
from banking_api.api.transactions import router as transactions_router

settings = get_settings()
setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        get_store().create_tables()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Multi-tenant banking API with an optimistic-concurrency ledger",
    lifespan=lifespan,
)


def error_body(message: str, code: str, details: dict | None = None) -> dict:
    body = {"error": message, "code": code}
    if details:
        body["details"] = details
    return body


@app.exception_handler(BankingError)
async def banking_error_handler(request: Request, exc: BankingError):
    context = {
        "path": request.url.path,
        "method": request.method,
        "code": exc.code,
    }
    if isinstance(exc, InternalError):
        logger.error(
            exc.message,
            exc_info=exc,
            extra={"context": {**context, **exc.details}},
        )
        message = INTERNAL_ERROR_MESSAGE
    else:
        logger.info("Operational error: %s", exc.message, extra={"context": context})
        message = exc.message

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, exc.code, exc.public_details),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    message = problems[0]["message"] if problems else "Invalid request"
    return JSONResponse(
        status_code=400,
        content=error_body(message, "VALIDATION_ERROR", {"errors": problems}),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unexpected error",
        exc_info=exc,
        extra={"context": {"path": request.url.path, "method": request.method}},
    )
    return JSONResponse(
        status_code=500,
        content=error_body(INTERNAL_ERROR_MESSAGE, InternalError.code),
    )


# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(accounts_router)
app.include_router(transactions_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "banking_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
