import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import api, models
from .config import get_settings
from .database import engine
from .registration import RegistrationAgent

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.info("Application starting up... Creating database tables.")
    models.Base.metadata.create_all(bind=engine)

    agent = None
    if settings.REGISTRY_URL:
        agent = RegistrationAgent(
            settings.REGISTRY_URL,
            settings.SERVICE_NAME,
            host=settings.SERVICE_HOST,
            port=settings.SERVICE_PORT,
            ttl=settings.LEASE_TTL,
            interval=settings.HEARTBEAT_INTERVAL,
            timeout=settings.REGISTRY_TIMEOUT,
        )
        agent.start()
    logging.info("Startup complete.")
    yield
    logging.info("Application shutting down...")
    if agent is not None:
        agent.stop()


app = FastAPI(
    title="Product Service",
    description="Catalog of products and their prices.",
    lifespan=lifespan,
)

app.include_router(api.product_router)
app.include_router(api.monitoring_router)
