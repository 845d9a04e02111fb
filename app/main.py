# app/main.py
import time
import uuid

from fastapi import FastAPI, Request

from app.core.settings import settings
from app.core.logging_config import setup_logging, logger
from app.observability.metrics import router as metrics_router
from app.routers import discounts


# ----------------------------------------------------
# App init
# ----------------------------------------------------
app = FastAPI(title="Tiered Discount", version="0.1.0")

setup_logging()
logger.info("startup", service=settings.APP_NAME, environment=settings.ENVIRONMENT)


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    client_ip = request.client.host if request.client else "unknown"

    bound_logger = logger.bind(
        request_id=request_id,
        ip=client_ip,
        endpoint=str(request.url.path),
        method=request.method,
    )

    bound_logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
        "request_finished"
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(discounts.router)
if settings.METRICS_ENABLED:
    app.include_router(metrics_router)  # /metrics
