"""ASGI application factory and dependencies for the Famly server."""

from famly.server.app import app, create_app

__all__ = ["app", "create_app"]
