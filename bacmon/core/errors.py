"""
Error taxonomy for the query layer.

ValidationError   caller supplied a missing or malformed parameter (HTTP 400)
StoreUnavailable  the reading store could not be reached or queried (HTTP 500)

An empty result is never an error.
"""

from typing import Optional


class QueryError(Exception):
    """Base class for query-layer failures."""


class ValidationError(QueryError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self):
        return {"error": self.message, "field": self.field}


class StoreUnavailable(QueryError):
    """Connection or query failure. Transient; callers may retry."""

    def __init__(self, detail: str, operation: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.operation = operation

    def to_dict(self, message: str):
        return {"error": message, "details": self.detail}
