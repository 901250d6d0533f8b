"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from dotenv import load_dotenv
from pymongo.errors import PyMongoError

# Must run before importing modules that read env vars at import time
load_dotenv()

# main.py is at <root>/src/api/main.py
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import health, users
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_users_database
from adapter.mongodb.user_repository import MongoUserRepository

DEBUG = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
MODE = os.getenv("MODE", "PROD").upper()
SERVICE_NAME = os.getenv("SERVICE_NAME", "user-service")

setup_structured_logging(logging.DEBUG if DEBUG else logging.INFO, service=SERVICE_NAME)

logger = logging.getLogger(__name__)

_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]


def prepare_users_collection() -> None:
    """Reset the collection in DEV mode and make sure indexes exist."""
    db = get_users_database()
    if db is None:
        logger.warning("MongoDB unavailable, skipping users collection setup")
        return

    repo = MongoUserRepository(db)
    if MODE == "DEV":
        logger.warning("DEV mode: dropping users collection")
        try:
            repo.drop()
        except PyMongoError as e:
            logger.error("Failed to drop users collection", extra={"error": str(e)})

    if repo.ensure_indexes():
        logger.info("MongoDB indexes verified/created successfully")
    else:
        logger.warning("Failed to create some MongoDB indexes")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    prepare_users_collection()
    logger.info("Created user service", extra={"service": SERVICE_NAME, "mode": MODE})
    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="User CRUD service: MongoDB persistence with change events on a Redis stream",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(users.router)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False,
    )
