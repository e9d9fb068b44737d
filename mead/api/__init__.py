"""HTTP API for the MeAd explorer.

Example:
    from mead.api import create_app

    app = create_app(cors_origins=["https://mead.example.org"])
"""

from mead.api.app import create_app
from mead.api.dependencies import AppState, get_app_state
from mead.api.sessions import ExplorerSessionStore

__all__ = [
    "AppState",
    "ExplorerSessionStore",
    "create_app",
    "get_app_state",
]
