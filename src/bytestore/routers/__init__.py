"""API routers for the bytestore service."""

from bytestore.routers import containers, downloads, health, info, objects

__all__ = ["containers", "downloads", "health", "info", "objects"]
