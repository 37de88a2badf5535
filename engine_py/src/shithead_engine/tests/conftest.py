"""
Shared fixtures and table-rigging helpers for engine tests.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from shithead_engine.engine import ShitheadEngine
from shithead_engine.models import Card, CardRef, Room
from shithead_engine.shuffle import create_deck

FULL_DECK = {card.id: card for card in create_deck()}


def card(label: str) -> Card:
    """Look up a card by id, e.g. ``"10♣"`` or ``"JOKER-red"``."""
    return FULL_DECK[label]


def cards(labels: Iterable[str]) -> List[Card]:
    return [card(label) for label in labels]


def hand(index: int) -> CardRef:
    return CardRef(source="hand", index=index)


def face_up(index: int) -> CardRef:
    return CardRef(source="faceUp", index=index)


def face_down(index: int) -> CardRef:
    return CardRef(source="faceDown", index=index)


def card_counts(room: Room) -> Counter:
    return Counter(c.id for c in room.all_cards())


def assert_cards_conserved(room: Room):
    """Every card of the deck is in exactly one place."""
    assert card_counts(room) == Counter(FULL_DECK.keys())


def rig_active_game(
    engine: ShitheadEngine,
    player_ids: Sequence[str],
    hands: Optional[Dict[str, List[str]]] = None,
    face_ups: Optional[Dict[str, List[str]]] = None,
    face_downs: Optional[Dict[str, List[str]]] = None,
    pile: Sequence[str] = (),
    deck: Sequence[str] = (),
) -> Room:
    """
    Build a room that is mid-game with exactly the given cards.

    Cards not placed anywhere are put out of play so the deck only holds
    what the test asks for and the full 54 are still accounted for.
    """
    hands = hands or {}
    face_ups = face_ups or {}
    face_downs = face_downs or {}

    room = engine.create_room(player_ids[0], player_ids[0].title()).room
    for player_id in player_ids[1:]:
        assert engine.join_room(room.code, player_id, player_id.title()).success

    used = []
    for player_id, player in room.players.items():
        player.hand = cards(hands.get(player_id, []))
        player.face_up_cards = cards(face_ups.get(player_id, []))
        player.face_down_cards = cards(face_downs.get(player_id, []))
        player.setup_complete = True
        used.extend(player.all_cards())

    state = room.game_state
    state.started = True
    state.setup_phase = False
    state.player_order = list(player_ids)
    state.current_player_index = 0
    state.direction = 1
    state.discard_pile = cards(pile)
    state.deck = cards(deck)
    used.extend(state.discard_pile)
    used.extend(state.deck)

    used_ids = {c.id for c in used}
    assert len(used_ids) == len(used), "a card was placed twice"
    state.out_of_play = [c for c in create_deck() if c.id not in used_ids]
    return room


@pytest.fixture
def engine():
    return ShitheadEngine()


@pytest.fixture
def three_player_room(engine):
    """Room with alice (host), bob and carol in the lobby."""
    room = engine.create_room("alice", "Alice").room
    engine.join_room(room.code, "bob", "Bob")
    engine.join_room(room.code, "carol", "Carol")
    return room
