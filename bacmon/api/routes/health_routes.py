#!/usr/bin/env python3
"""
Health Routes - Store statistics and liveness
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ...core.audit import audit_logger
from ...core.errors import StoreUnavailable
from ..dependencies import QueryDependencies
from ..queries import SeriesStore, get_health
from ..queries.utils import format_instant
from ..schemas import HealthResponse

logger = logging.getLogger("bacmon.server")


def create_health_routes(deps: QueryDependencies) -> APIRouter:
    """Create health and liveness routes."""
    router = APIRouter()

    @router.get("/api/health", response_model=HealthResponse)
    def health_stats(
        request: Request,
        store: SeriesStore = Depends(deps.get_store),
        now: float = Depends(deps.now),
    ):
        """Row estimate, cardinality, footprint, data rate and top-20 point stats."""
        try:
            health = get_health(store, now)
        except StoreUnavailable as e:
            logger.error(f"Error fetching health stats: {e}")
            audit_logger.store_failure("health", e.detail, request)
            return JSONResponse(status_code=500, content=e.to_dict("Failed to fetch health stats"))

        audit_logger.query("health", {"unique_points": health.unique_points}, request)
        return HealthResponse.build(health)

    @router.get("/api/ping")
    def ping(
        store: SeriesStore = Depends(deps.get_store),
        now: float = Depends(deps.now),
    ):
        """Liveness: does the store answer a trivial query."""
        try:
            store.ping()
            db_ok = True
        except StoreUnavailable:
            db_ok = False
        return JSONResponse(
            status_code=200 if db_ok else 503,
            content={"status": "ok" if db_ok else "degraded",
                     "db": "connected" if db_ok else "down",
                     "timestamp": format_instant(now)},
        )

    return router
