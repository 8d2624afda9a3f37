"""
InkValue Studio API
FastAPI backend for a tattoo studio: pricing, proposals, reports and documents.
Single-user, local-first: state lives in a SQLite key-value table.
"""
import os
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from inkvalue.services.errors import StudioError
from inkvalue.services.llm_client import PRIMARY_MODEL, llm_configured
from inkvalue.services.logging_config import setup_logging
from inkvalue.services.middleware import RequestTimingMiddleware

load_dotenv()

_log_level = os.getenv("LOG_LEVEL", "INFO")
_json_logs = os.getenv("LOG_FORMAT", "json").lower() != "text"
setup_logging(level=_log_level, json_output=_json_logs)
logger = logging.getLogger("inkvalue-api")

VERSION = "1.0.0"

if not llm_configured():
    logger.info("No LLM provider key set — advisor endpoints will return static content")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests install their own studio before startup
    if getattr(app.state, "studio", None) is None:
        from inkvalue.db import init_db
        from inkvalue.services.persistence import SqlKeyValueStore
        from inkvalue.services.studio_service import StudioService

        init_db()
        app.state.studio = StudioService(SqlKeyValueStore())
    yield


app = FastAPI(
    title="InkValue Studio API",
    version=VERSION,
    description="Pricing, proposals and reporting for tattoo studios",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Domain errors → HTTP
# ---------------------------------------------------------------------------
@app.exception_handler(StudioError)
async def studio_error_handler(request: Request, exc: StudioError):
    logger.info(
        "%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# ---------------------------------------------------------------------------
# Security Headers Middleware
# ---------------------------------------------------------------------------
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard security headers to every response."""
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


_cors_default = "http://localhost:3000,http://localhost:5173"
cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _cors_default).split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With"],
)
app.add_middleware(SecurityHeadersMiddleware)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

# Routers
from inkvalue.api.settings_routes import router as settings_router  # noqa: E402
from inkvalue.api.client_routes import router as client_router  # noqa: E402
from inkvalue.api.pricing_routes import router as pricing_router  # noqa: E402
from inkvalue.api.proposal_routes import router as proposal_router  # noqa: E402
from inkvalue.api.report_routes import router as report_router  # noqa: E402
from inkvalue.api.advisor_routes import router as advisor_router  # noqa: E402

app.include_router(settings_router)
app.include_router(client_router)
app.include_router(pricing_router)
app.include_router(proposal_router)
app.include_router(report_router)
app.include_router(advisor_router)


@app.get("/health")
async def health_check():
    studio = getattr(app.state, "studio", None)
    return {
        "status": "active",
        "version": VERSION,
        "state_loaded": studio is not None,
        "llm_primary": PRIMARY_MODEL,
        "llm_configured": llm_configured(),
    }
