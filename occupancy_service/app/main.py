import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import AuthBase, Base, auth_engine, facility_engine
from shared.core.logging import configure_logging
from shared.exception_handler import setup_exception_handlers
from shared.models import users

from .core.exceptions import HTTP_ERROR_MAP
from .models.space_sites import (
    spaces,
    space_occupancies,
    space_handover,
    space_inspections,
    space_maintenances,
    space_settlements,
    space_occupancy_events,
    space_occupancy_history)
from .models.system import notifications
from .router.space_sites import space_occupancy_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    Base.metadata.create_all(bind=facility_engine)
    AuthBase.metadata.create_all(bind=auth_engine)
    logger.info("Occupancy service started")
    yield


app = FastAPI(title="Space Occupancy Service API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app, HTTP_ERROR_MAP)

# Include routers
app.include_router(space_occupancy_router.router)


@app.get("/health")
def health():
    return {"status": "ok"}
