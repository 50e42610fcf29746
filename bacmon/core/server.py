#!/usr/bin/env python3
"""
bacmon FastAPI application factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..api.dependencies import QueryDependencies
from ..api.queries import SeriesStore
from ..api.routes import (
    create_export_routes, create_health_routes, create_points_routes, create_trends_routes
)
from ..models import DatabaseManager
from .config import ServerConfig
from .errors import ValidationError

logger = logging.getLogger("bacmon.server")


def create_app(
    config: ServerConfig,
    store: Optional[SeriesStore] = None,
    clock: Optional[Callable[[], float]] = None,
    manage_database: bool = True,
) -> FastAPI:
    """
    Build the API.

    Args:
        config: Server configuration
        store: Store adapter override (tests bind their own database)
        clock: Epoch-seconds clock override
        manage_database: Open/close the configured database in the app lifespan
    """
    db_manager = DatabaseManager(config.database_url, timeout=config.db_timeout,
                                 max_connections=config.max_connections)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if manage_database and not db_manager.connect():
            # keep serving; requests report StoreUnavailable until the store is back
            logger.warning("store not reachable at startup")
        yield
        if manage_database:
            db_manager.close()

    app = FastAPI(title="bacmon", version=__version__, lifespan=lifespan)
    deps = QueryDependencies(store=store, clock=clock)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.debug(f"rejected {request.url.path}: {exc.field}: {exc.message}")
        return JSONResponse(status_code=400, content=exc.to_dict())

    app.include_router(create_points_routes(deps))
    app.include_router(create_trends_routes(deps))
    app.include_router(create_export_routes(deps))
    app.include_router(create_health_routes(deps))
    return app
