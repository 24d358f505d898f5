import logging
import time
import uuid

from fastapi import FastAPI, Request, Response

from .api import router as api_router
from .settings.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Navhub API", version="0.1.0")
app.include_router(api_router, prefix="/api/v1")


@app.on_event("shutdown")
async def _close_http_client() -> None:
    client = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    start = time.perf_counter()
    response: Response = await call_next(request)
    elapsed = time.perf_counter() - start
    response.headers["X-Request-Id"] = request_id
    logging.getLogger("navhub").info(
        "request method=%s path=%s status=%d latency=%.3f",
        request.method,
        request.url.path,
        response.status_code,
        elapsed,
    )
    return response


@app.get("/api/v1/health")
def health_check() -> dict:
    """Lightweight health check."""
    return {
        "status": "ok",
        "env": settings.env,
        "site_root": settings.site_root,
    }
