"""FastAPI app, background workers, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

# Configure logging in the worker process (so poller/sync INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from tubemirror.api.state import AppState, get_state
from tubemirror.config import MONITOR_PLAYERS, ensure_cache_dir

# Import routes after state to avoid circular imports
from tubemirror.api.routes import control

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)

SHUTDOWN_JOIN_SEC = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = get_state()
    ensure_cache_dir()
    logger.info("Options: %s", state.options)

    state.engine.start(state.channel)
    if MONITOR_PLAYERS:
        # discovery failure or a malformed cache aborts startup here
        state.poller.start(state.stop_event)
    else:
        logger.info("Player monitoring disabled")

    yield

    state.stop_event.set()
    if MONITOR_PLAYERS:
        state.poller.join(timeout=SHUTDOWN_JOIN_SEC)
    state.channel.close()
    state.engine.join(timeout=SHUTDOWN_JOIN_SEC)


app = FastAPI(
    title="Tubemirror API",
    description="Mirror tracks played on your speakers into a video playlist",
    lifespan=lifespan,
)

app.include_router(control.router, tags=["control"])
