from __future__ import annotations

from fastapi import FastAPI

from indexer.api.routers import events, pools, positions
from indexer.shared.config import get_settings
from indexer.shared.logging_setup import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(title="Pool Ledger Indexer")
    application.include_router(events.router)
    application.include_router(pools.router)
    application.include_router(positions.router)
    return application


app = create_app()
