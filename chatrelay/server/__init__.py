"""
HTTP server for the chat relay.
"""

from .main import create_app

__all__ = ["create_app"]
