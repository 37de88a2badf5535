"""Authoritative game engine and WebSocket server for the Shithead card game."""

from .engine import ActionResult, RoomStore, ShitheadEngine
from .models import Card, CardRef, GameState, Player, Room
from .rules import RuleConfig, create_rules, default_rules

__all__ = [
    "ActionResult",
    "RoomStore",
    "ShitheadEngine",
    "Card",
    "CardRef",
    "GameState",
    "Player",
    "Room",
    "RuleConfig",
    "create_rules",
    "default_rules",
]

__version__ = "1.0.0"
