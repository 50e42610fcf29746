from .points_routes import create_points_routes
from .trends_routes import create_trends_routes
from .export_routes import create_export_routes
from .health_routes import create_health_routes

__all__ = [
    "create_points_routes",
    "create_trends_routes",
    "create_export_routes",
    "create_health_routes",
]
