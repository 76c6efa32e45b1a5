"""
asgi.py -- ASGI entry point for FormBot.

The API is the whole application; this module exists so deployments and the
dev server have one stable import path regardless of how api/ is organized.

Run with:  uvicorn asgi:app --reload
"""

from api.main import app

__all__ = ["app"]
