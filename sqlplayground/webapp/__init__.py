"""HTTP API for the playground."""

from sqlplayground.webapp.app import create_app

__all__ = ["create_app"]
