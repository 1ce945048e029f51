"""Distribution console FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
under a console route is wrapped in the distribution domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (delivery opened in the request)
#   - "production" → event_processing = "async" (delivery opened via Engine)
from distribution.domain import distribution  # noqa: E402
from distribution.utils.logging import add_context, clear_context  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

distribution.init()

_DOMAIN_PREFIXES = ("/orders", "/returns", "/deliveries")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Distribution Console API",
    description="Order ledger, return orders and delivery tracking for shop distribution",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the distribution domain context for console requests."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        add_context(path=request.url.path, employee_id=request.headers.get("x-employee-id"))
        try:
            with distribution.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from distribution.api.routes import delivery_router, order_router, return_router  # noqa: E402

app.include_router(order_router)
app.include_router(return_router)
app.include_router(delivery_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "distribution": {"name": distribution.name},
            },
        }
    )
