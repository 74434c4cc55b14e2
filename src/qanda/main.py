"""
Module: main.py
Description: FastAPI application entry point for the Q&A API.

Initializes the FastAPI application with all routes, middleware,
and error handlers, and exposes the AWS Lambda handler.
"""

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi import status as status_codes
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum

from qanda.config.settings import settings
from qanda.handlers.errors import to_http_exception
from qanda.handlers.events import router as events_router
from qanda.handlers.questions import router as questions_router
from qanda.storage.base import QuestionStore
from qanda.storage.errors import StoreError
from qanda.storage.factory import get_store
from qanda.utils.logger import get_logger

logger = get_logger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Live audience Q&A: ask, vote, moderate",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(GZipMiddleware, minimum_size=500)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(events_router)
app.include_router(questions_router)


def _route_path(request: Request) -> str:
    # Moderator URLs carry the event secret; log the route template instead
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


def _error_body(status_code: int, message: str, error_type: str) -> dict:
    return {
        "error": {
            "code": status_code,
            "message": message,
            "type": error_type
        }
    }


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than max_bytes with 413.

    A declared Content-Length is checked before anything is read. Bodies
    sent without one (chunked uploads) are buffered up to the limit and
    replayed to the application only if they fit.
    """

    def __init__(self, app, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Request(scope).headers.get("content-length")
        if content_length is not None:
            try:
                too_large = int(content_length) > self.max_bytes
            except ValueError:
                too_large = True

            if too_large:
                await self._reject(scope, receive, send, size=content_length)
            else:
                await self.app(scope, receive, send)
            return

        buffered = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break

            received += len(message.get("body", b""))
            if received > self.max_bytes:
                await self._reject(scope, receive, send, size=f">{received}")
                return
            more_body = message.get("more_body", False)

        async def replay():
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope, receive, send, size: str):
        logger.warning(
            "Request body rejected",
            content_length=size,
            limit=self.max_bytes,
            method=scope.get("method")
        )
        response = JSONResponse(
            status_code=status_codes.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content=_error_body(413, "Request body too large", "payload_too_large")
        )
        await response(scope, receive, send)


app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)


@app.get("/health")
async def health_check(store: QuestionStore = Depends(get_store)):
    """
    Health check endpoint.

    Returns basic application health information and the active
    storage backend.
    """
    return {
        "status": "ok",
        "message": "Q&A API is healthy",
        "version": settings.app_version,
        "environment": settings.stage,
        "backend": store.backend_name
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Global HTTP exception handler.

    Logs HTTP exceptions and returns structured error responses.
    """
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        route=_route_path(request),
        method=request.method
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail, "http_exception")
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Map storage errors that escaped a route onto HTTP responses."""
    return await http_exception_handler(request, to_http_exception(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    Logs unexpected exceptions and returns generic error responses.
    """
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        route=_route_path(request),
        method=request.method
    )

    return JSONResponse(
        status_code=status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(500, "Internal server error", "internal_error")
    )


@app.on_event("startup")
async def startup_event():
    """Application startup event handler."""
    logger.info(
        "Starting Q&A API",
        version=settings.app_version,
        stage=settings.stage,
        backend=settings.storage_backend,
        region=settings.aws_region
    )


# Lambda handler
handler = Mangum(app, lifespan="off")
