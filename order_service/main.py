import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from . import api, models
from .database import engine
from .dependencies import get_product_client

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info("Application starting up... Creating database tables.")
    models.Base.metadata.create_all(bind=engine)
    logging.info("Startup complete.")
    yield
    logging.info("Application shutting down...")
    if get_product_client.cache_info().currsize:
        get_product_client().close()
        get_product_client.cache_clear()


app = FastAPI(
    title="Order Service",
    description="Places orders priced by the product service and keeps them.",
    lifespan=lifespan,
)

app.include_router(api.order_router)
app.include_router(api.monitoring_router)

metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)
