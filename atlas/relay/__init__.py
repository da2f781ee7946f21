"""HTTP relay between the client and the text-generation provider."""

from .app import create_app

__all__ = ["create_app"]
