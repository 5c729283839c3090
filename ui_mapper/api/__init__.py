"""HTTP interface for the UI Mapper framework."""

from .app import create_app

__all__ = ["create_app"]
