"""Storefront FastAPI application.

Every request runs inside the storefront domain context, so routes can
dispatch commands through ``current_domain``.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# PROTEAN_ENV selects the config overlay in storefront/domain.toml:
#   - unset / "test" → in-memory database
#   - "production"   → PostgreSQL at $DATABASE_URL
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.api import register_storefront_error_handlers, routers
from storefront.domain import storefront

storefront.init()

app = FastAPI(
    title="Storefront API",
    description="Apparel storefront: catalogue, cart, checkout and admin dashboard",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    with storefront.domain_context():
        return await call_next(request)


for router in routers:
    app.include_router(router)

register_exception_handlers(app)
register_storefront_error_handlers(app)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
