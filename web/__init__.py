"""FastAPI web application for Go Lambda Builder.

This module provides the HTTP API that mirrors the core build service.

All business logic is delegated to core modules in go_lambda_builder/.
"""

from web.app import app, create_app

__all__ = ["app", "create_app"]
