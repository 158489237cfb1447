"""Circles service entry point.

On startup the settings are loaded, the container connects to Redis and
the event handler is injected into the router. The router itself is
registered when the module is imported, so routes exist before startup.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from circles.config import Settings
from circles.container import Container
from circles.middleware import PrometheusMiddleware
from circles.routers import event_router, set_event_handler

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

container: Optional[Container] = None


def startup_sequence(settings: Settings) -> None:
    """Connect to the document store and make the router serviceable."""
    global container

    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info(f"[Main] Starting up (redis={settings.redis_address}, tz={settings.event_timezone})")

    container = Container(settings)
    set_event_handler(container.event_handler)

    logger.info("[Main] Ready")


def shutdown_sequence() -> None:
    """Detach the handler and close the Redis pool."""
    global container

    logger.info("[Main] Shutting down")
    set_event_handler(None)
    if container is not None:
        container.shutdown()
        container = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_sequence(Settings())
    yield
    shutdown_sequence()


settings = Settings()
app = FastAPI(
    title="Circles API",
    description="Circle taxonomy lookups and event filtering",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(PrometheusMiddleware)
app.include_router(event_router)


@app.get("/health")
def health():
    """Liveness check; does not touch Redis."""
    return {"status": "healthy"}


@app.get("/metrics", response_class=PlainTextResponse)
def metrics():
    """Prometheus scrape endpoint."""
    return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
