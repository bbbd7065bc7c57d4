"""Dispatch engine FastAPI application.

Serves the courier action links and receives document-change triggers and
timer ticks from the platform's event bus. Every request runs inside the
dispatch domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# Protean's own settings come from [tool.protean] in pyproject.toml.
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dispatch.domain import dispatch
from dispatch.utils.logging import configure_logging

configure_logging()
dispatch.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Dispatch API",
    description="Order event orchestration and delivery dispatch",
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the dispatch domain context for each request."""
    with dispatch.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from dispatch.api import router  # noqa: E402

app.include_router(router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "dispatch": {"name": dispatch.name},
            },
        }
    )
