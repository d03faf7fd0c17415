"""HTTP API module."""

from logsentinel.api.app import create_app

__all__ = ["create_app"]
