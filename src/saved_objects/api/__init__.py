"""HTTP API for saved objects."""

from saved_objects.api.app import create_app

__all__ = ["create_app"]
