"""HTTP service exposing props mocks and story prompts."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
