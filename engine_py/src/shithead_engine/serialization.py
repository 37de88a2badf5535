"""
State serialization for outbound game state updates.
"""

from typing import Any, Dict, List, Optional

from .comparator import effective_top_card
from .models import Card, GameState, Player, Room


def serialize_card(card: Optional[Card]) -> Optional[Dict[str, Any]]:
    if card is None:
        return None
    return {
        "id": card.id,
        "suit": card.suit,
        "rank": card.rank,
        "value": card.value,
        "color": card.color,
    }


def serialize_cards(cards: List[Card]) -> List[Dict[str, Any]]:
    return [serialize_card(card) for card in cards]


def serialize_player(player: Player) -> Dict[str, Any]:
    """Serialize a player, face-down cards included."""
    return {
        "id": player.id,
        "name": player.name,
        "hand": serialize_cards(player.hand),
        "faceUpCards": serialize_cards(player.face_up_cards),
        "faceDownCards": serialize_cards(player.face_down_cards),
        "setupComplete": player.setup_complete,
    }


def serialize_game_state(state: GameState) -> Dict[str, Any]:
    return {
        "started": state.started,
        "setupPhase": state.setup_phase,
        "currentPlayer": state.current_player_index,
        "currentPlayerId": state.current_player_id,
        "deck": serialize_cards(state.deck),
        "deckCount": len(state.deck),
        "discardPile": serialize_cards(state.discard_pile),
        "outOfPlayCount": len(state.out_of_play),
        "playerOrder": list(state.player_order),
        "direction": state.direction,
        "invisibleCard": serialize_card(state.invisible_card),
        "winner": state.winner,
        "gameLog": list(state.game_log),
    }


def serialize_room(room: Room, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the ``gameStateUpdate`` payload for one room member.

    Args:
        room: Room to serialize
        viewer_id: Player receiving the update; only ``isHost`` depends on it

    Returns:
        JSON-ready dictionary
    """
    return {
        "roomCode": room.code,
        "phase": room.phase,
        "players": [serialize_player(player) for player in room.players.values()],
        "gameState": serialize_game_state(room.game_state),
        "isHost": viewer_id is not None and viewer_id == room.host,
        "effectiveTopCard": serialize_card(effective_top_card(room.game_state)),
    }
