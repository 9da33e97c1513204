"""HTTP adapter over the services."""

from hoopstats.api.app import create_app

__all__ = ["create_app"]
