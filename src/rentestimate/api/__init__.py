"""
Flask REST API exposing the rent estimation service.
"""

from rentestimate.api.server import create_app
from rentestimate.api.routes import register_routes

__all__ = [
    "create_app",
    "register_routes",
]
