"""
PurdueRide API package.

Provides the FastAPI application for the PurdueRide ride-booking service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
