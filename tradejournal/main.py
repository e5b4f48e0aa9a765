"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradejournal import __version__
from tradejournal.config import settings
from tradejournal.database import create_db_and_tables
from tradejournal.errors import register_error_handlers
from tradejournal.utils.logging import setup_logging
from tradejournal.api import auth, trades, analytics, risk, system


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    yield


app = FastAPI(
    title="Trade Journal",
    description="Trade journal with lifecycle tracking, analytics and risk tools",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Mount routers
app.include_router(auth.router)
app.include_router(trades.router)
app.include_router(analytics.router)
app.include_router(risk.router)
app.include_router(system.router)
