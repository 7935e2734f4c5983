import logging

from fastapi import FastAPI

from . import api

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Service Registry",
    description="Resolves logical service names to live instance addresses.",
)

app.include_router(api.registry_router)
app.include_router(api.monitoring_router)
