"""Storefront FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Every request runs inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from protean.integrations.fastapi import register_exception_handlers

from storefront import config
from storefront.api import ROUTERS
from storefront.api.rate_limit import TOO_MANY_REQUESTS, client_key, global_limiter
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which domain.toml overlay applies:
#   - "test"       → in-memory stores, testing flag on
#   - "production" → PostgreSQL via DATABASE_URL
storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce backend: catalogue, carts, checkout and order administration",
)

register_exception_handlers(app)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"title": "Server failure", "status": 500})


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with storefront.domain_context():
        return await call_next(request)


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Per-client request budget across the whole API."""
    if not global_limiter.hit(client_key(request)):
        logger.warning("rate_limited", path=request.url.path, client=client_key(request))
        return JSONResponse(status_code=429, content={"detail": TOO_MANY_REQUESTS})
    return await call_next(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
for router in ROUTERS:
    app.include_router(router)

app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
