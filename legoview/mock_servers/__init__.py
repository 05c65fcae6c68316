"""Mock LEGO API server for offline runs and tests."""

from .app import create_app, create_mock_app

__all__ = ["create_app", "create_mock_app"]
