# launchit/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from launchit import __version__
from launchit.api.routes import discovery, health, routing
from launchit.services.discovery import discovery_service
from launchit.utils.async_utils import cleanup_executor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 LaunchIt network service starting up...")

    yield  # Application is running

    logger.info("Shutting down: stopping scans")
    discovery_service.stop_scanning()
    cleanup_executor()


app = FastAPI(title="LaunchIt Network Core", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(discovery.router)
app.include_router(health.router)
app.include_router(routing.router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "launchit", "version": __version__}
