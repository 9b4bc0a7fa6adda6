"""API package for Interview Tracker."""

from .main import app, build_services, create_app

__all__ = ["app", "build_services", "create_app"]
