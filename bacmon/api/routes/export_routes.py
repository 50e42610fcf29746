#!/usr/bin/env python3
"""
Export Routes - CSV download in long or wide format
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from ...core.audit import audit_logger
from ...core.errors import StoreUnavailable
from ..dependencies import QueryDependencies
from ..queries import SeriesStore, export_table

logger = logging.getLogger("bacmon.server")


def create_export_routes(deps: QueryDependencies) -> APIRouter:
    """Create CSV export routes."""
    router = APIRouter()

    @router.get("/api/export")
    def export_csv(
        request: Request,
        startDate: Optional[str] = Query(None),
        endDate: Optional[str] = Query(None),
        format: Optional[str] = Query(None),
        store: SeriesStore = Depends(deps.get_store),
    ):
        """Export every reading in [startDate, endDate] as CSV."""
        try:
            table = export_table(store, startDate, endDate, format)
            content = table.to_csv()
        except StoreUnavailable as e:
            logger.error(f"Error exporting CSV: {e}")
            audit_logger.store_failure("export", e.detail, request)
            return JSONResponse(status_code=500, content=e.to_dict("Failed to export CSV"))

        audit_logger.export(table.fmt, startDate, endDate, table.reading_count, request)
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{table.filename}"'},
        )

    return router
