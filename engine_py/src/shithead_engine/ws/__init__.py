"""
WebSocket server and event handling for the Shithead game.
"""

from .server import ConnectionManager, GameServer

__all__ = ["ConnectionManager", "GameServer"]
