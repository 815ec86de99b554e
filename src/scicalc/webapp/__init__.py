"""
Web transport for the calculator.

Serves the JSON API the browser front-end talks to.
"""

from .server import app, configure

__all__ = ["app", "configure"]
