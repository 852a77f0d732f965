import logging
import time

from fastapi import FastAPI, Request, Response, HTTPException
from fastapi.responses import PlainTextResponse, JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from sqlite_parser.prom import REGISTRY
from app.routers import dev, schema
from app.settings import get_settings
from app.dependencies import get_schema_service
from app.exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)

settings = get_settings()

# ----------------------------------------------------------------------------
#  App definition
# ----------------------------------------------------------------------------
app = FastAPI(
    title="SQLite Schema Parser",
    version=settings.app_version,
    description="Language-agnostic table, column and foreign-key metadata of SQLite files",
)
register_exception_handlers(app)

# Register only versioned API
app.include_router(schema.router, prefix="/api/v1")

# Register Dev-only routes (only when APP_ENV=dev)
if settings.app_env == "dev":
    app.include_router(dev.router, prefix="/api/v1")


@app.exception_handler(HTTPException)
async def http_exception_to_error_contract(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# ----------------------------------------------------------------------------
#  Prometheus Metrics Middleware
# ----------------------------------------------------------------------------
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["path", "method", "status_code"],
    registry=REGISTRY,
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Request latency (seconds)",
    ["path", "method"],
    registry=REGISTRY,
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.perf_counter()
    response: Response = await call_next(request)
    elapsed = time.perf_counter() - start
    route = request.scope.get("route")
    path = getattr(route, "path", None) or request.url.path
    name = getattr(route, "name", None) or path

    REQUEST_COUNT.labels(
        path=name,
        method=request.method,
        status_code=str(getattr(response, "status_code", 500)),
    ).inc()
    REQUEST_LATENCY.labels(path=name, method=request.method).observe(elapsed)
    return response


# ----------------------------------------------------------------------------
#  System Endpoints
# ----------------------------------------------------------------------------
@app.get("/healthz", response_class=PlainTextResponse, tags=["system"])
def healthz() -> str:
    return "ok"


@app.get("/readyz", response_class=PlainTextResponse, tags=["system"])
def readyz() -> str:
    """Readiness probe: the default SQLite DB must open and list its tables."""
    try:
        get_schema_service().ping()
        return "ready"
    except Exception as exc:
        logger.info("Readiness check failed: %s", exc)
        raise HTTPException(status_code=503, detail="not ready")


@app.get("/", tags=["system"])
def root():
    return {"status": "ok", "message": "SQLite Schema Parser API is running"}


@app.get("/metrics", tags=["system"])
def metrics():
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
