#!/usr/bin/env python3
"""
bacmon Query Audit Logger

One JSON line per served read request on the "bacmon.audit" logger: which
endpoint, which range or point, how many rows went out, and who asked.
Store failures are logged at WARNING so they stand out from routine reads.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from fastapi import Request


class AuditLogger:
    """Centralized audit logging for query events."""

    def __init__(self):
        self.logger = logging.getLogger("bacmon.audit")

    @staticmethod
    def _caller(request: Request) -> Dict[str, Any]:
        return {
            "client": request.client.host if request.client else None,
            "path": request.url.path,
            "params": dict(request.query_params),
        }

    def _log_event(self, event: str, endpoint: str, details: Dict[str, Any],
                   request: Optional[Request] = None, level: int = logging.INFO):
        record = {
            "at": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "event": event,
            "endpoint": endpoint,
        }
        # unset filters (no search, default range) are left out of the line
        record.update({k: v for k, v in details.items() if v is not None})
        if request is not None:
            record.update(self._caller(request))
        self.logger.log(level, json.dumps(record, default=str))

    def query(self, endpoint: str, details: Dict[str, Any], request: Optional[Request] = None):
        """Log a served snapshot/trend/health query."""
        self._log_event("query", endpoint, details, request)

    def export(self, fmt: str, start: str, end: str, rows: int, request: Optional[Request] = None):
        """Log a CSV export download."""
        self._log_event("export", "export",
                        {"format": fmt, "start": start, "end": end, "rows": rows}, request)

    def store_failure(self, endpoint: str, detail: str, request: Optional[Request] = None):
        """Log a request that failed because the store was unavailable."""
        self._log_event("store_failure", endpoint, {"detail": detail}, request,
                        level=logging.WARNING)


# Global audit logger instance
audit_logger = AuditLogger()
