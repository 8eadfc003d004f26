from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dotenv import load_dotenv

from endpoints.body_limit import BodySizeLimitMiddleware
from endpoints.rate_limit import FixedWindowRateLimiter, client_key
from persistence import ContactLog, JsonDocumentStore
from persistence.paths import contact_log_file, data_dir, store_file
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",
}


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    store: JsonDocumentStore = app.state.store
    await store.start()
    logger.info("Store ready at %s", store.path)
    try:
        yield
    finally:
        await store.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")
    settings = settings or get_settings()

    from endpoints.api_endpoints import router as api_router

    app = FastAPI(lifespan=lifespan)

    data = data_dir(settings)
    app.state.settings = settings
    app.state.store = JsonDocumentStore(store_file(data))
    app.state.contact_log = ContactLog(contact_log_file(data))
    app.state.api_limiter = FixedWindowRateLimiter(settings.rate_limit_per_minute, 60)
    app.state.contact_limiter = FixedWindowRateLimiter(
        settings.contact_rate_limit, settings.contact_rate_window_seconds
    )

    # Middleware added later wraps what was added before: body limit innermost, CORS outermost.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    @app.middleware("http")
    async def rate_limit_api(request: Request, call_next):
        if not request.url.path.startswith("/api/"):
            return await call_next(request)

        state = app.state.api_limiter.hit(client_key(request))
        if not state.allowed:
            return JSONResponse(
                {"error": "Too many requests, please try again later."},
                status_code=429,
                headers=state.headers(),
            )
        response = await call_next(request)
        response.headers.update(state.headers())
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if settings.debug_log_requests:
            logger.debug("REQUEST: %s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods on known paths both answer 404.
        if exc.status_code in (404, 405):
            return JSONResponse({"error": "Not found"}, status_code=404)
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    app.include_router(api_router)

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    logging.basicConfig(
        level=_settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(_settings), host=_settings.host, port=_settings.port)
