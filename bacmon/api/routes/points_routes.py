#!/usr/bin/env python3
"""
Points Routes - Live value snapshot per monitored point
"""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ...core.audit import audit_logger
from ...core.errors import StoreUnavailable
from ..dependencies import QueryDependencies
from ..queries import SeriesStore, get_snapshot
from ..queries.constants import DEFAULT_SNAPSHOT_LIMIT
from ..schemas import SnapshotResponse

logger = logging.getLogger("bacmon.server")


def create_points_routes(deps: QueryDependencies) -> APIRouter:
    """Create live snapshot routes."""
    router = APIRouter()

    @router.get("/api/points", response_model=SnapshotResponse)
    def get_points(
        request: Request,
        search: str = Query(""),
        limit: int = Query(DEFAULT_SNAPSHOT_LIMIT, ge=1),
        store: SeriesStore = Depends(deps.get_store),
        now: float = Depends(deps.now),
    ):
        """Latest reading per point from the last hour, optionally filtered by name."""
        try:
            snapshots = get_snapshot(store, now, search=search, limit=limit)
        except StoreUnavailable as e:
            logger.error(f"Error fetching points: {e}")
            audit_logger.store_failure("points", e.detail, request)
            return JSONResponse(status_code=500, content=e.to_dict("Failed to fetch points"))

        audit_logger.query("points", {"search": search, "limit": limit, "returned": len(snapshots)}, request)
        return SnapshotResponse.build(snapshots, now)

    return router
