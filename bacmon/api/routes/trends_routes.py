#!/usr/bin/env python3
"""
Trends Routes - Single-point time series for charts
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ...core.audit import audit_logger
from ...core.errors import StoreUnavailable
from ..dependencies import QueryDependencies
from ..queries import SeriesStore, get_trend
from ..queries.constants import DEFAULT_TREND_RANGE
from ..schemas import TrendResponse

logger = logging.getLogger("bacmon.server")


def create_trends_routes(deps: QueryDependencies) -> APIRouter:
    """Create trend routes."""
    router = APIRouter()

    @router.get("/api/trends", response_model=TrendResponse)
    def get_trends(
        request: Request,
        point: Optional[str] = Query(None),
        range: str = Query(DEFAULT_TREND_RANGE),
        store: SeriesStore = Depends(deps.get_store),
        now: float = Depends(deps.now),
    ):
        """
        Full-resolution series for one point over 1h/6h/24h/7d/30d.
        Unknown ranges fall back to 1h; a missing point is a 400.
        """
        try:
            trend = get_trend(store, point, range, now)
        except StoreUnavailable as e:
            logger.error(f"Error fetching trend data for {point}: {e}")
            audit_logger.store_failure("trends", e.detail, request)
            return JSONResponse(status_code=500, content=e.to_dict("Failed to fetch trend data"))

        audit_logger.query("trends", {"point": point, "range": trend.range_key, "count": trend.count}, request)
        return TrendResponse.build(trend, now)

    return router
