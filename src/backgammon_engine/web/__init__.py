"""HTTP JSON interface over a single game."""

from backgammon_engine.web.server import create_app

__all__ = ["create_app"]
