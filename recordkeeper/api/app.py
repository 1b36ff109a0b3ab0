"""FastAPI app, CORS, static fallback files and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from recordkeeper.config import LOG_FORMAT, LOG_LEVEL, STATIC_DATA_DIR

# Configure logging in the worker process (uvicorn --reload spawns a fresh one)
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

from recordkeeper.api.state import AppState, get_state

# Import routes after state to avoid circular imports
from recordkeeper.api.routes import contacts, movies

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = get_state()
    await state.load_all()
    logger.info(
        "Initial load: %d contacts (%s), %d movies (%s)",
        len(state.contacts.state.records),
        state.contacts.state.source,
        len(state.movies.state.records),
        state.movies.state.source,
    )

    yield

    await state.aclose()


app = FastAPI(
    title="Recordkeeper API",
    description="Contacts and movies backed by a local REST mock server with file fallbacks",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(contacts.router, prefix="/api/contacts", tags=["contacts"])
app.include_router(movies.router, prefix="/api/movies", tags=["movies"])
# Same files the static-file tier reads, for browsers
app.mount("/data", StaticFiles(directory=STATIC_DATA_DIR, check_dir=False), name="data")
