import logging

from fastapi import FastAPI

from .routes import API_VERSION, health_router, router
from ..core.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)

app = FastAPI(title="ProspectFinder API", version=API_VERSION)
app.include_router(router, prefix="/v1")
app.include_router(health_router)
