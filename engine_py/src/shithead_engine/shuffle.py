"""
Card deck construction, shuffling and dealing utilities.
"""

import random
from typing import List, Optional

from .constants import (
    JOKER, JOKER_COLORS, JOKER_SUIT, RANKS, SUITS, rank_value, suit_color
)
from .models import Card, Player


def create_deck(use_jokers: bool = True) -> List[Card]:
    """Create a standard deck of cards, in suit/rank order."""
    deck = []

    # Standard 52 cards
    for suit in SUITS:
        for rank in RANKS:
            deck.append(Card(suit=suit, rank=rank, value=rank_value(rank), color=suit_color(suit)))

    # Jokers rank above the ace
    if use_jokers:
        for color in JOKER_COLORS:
            deck.append(Card(suit=JOKER_SUIT, rank=JOKER, value=rank_value(JOKER), color=color))

    return deck


def shuffle_deck(deck: List[Card], seed: Optional[int] = None) -> List[Card]:
    """
    Shuffle a deck deterministically if seed is provided.

    Args:
        deck: List of cards to shuffle
        seed: Optional seed for deterministic shuffling

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()

    if seed is not None:
        # Use deterministic shuffling with seed
        rng = random.Random(seed)
        rng.shuffle(deck_copy)
    else:
        # Use system random
        random.shuffle(deck_copy)

    return deck_copy


def build_deck(use_jokers: bool = True, seed: Optional[int] = None) -> List[Card]:
    """Create a fresh, shuffled deck."""
    return shuffle_deck(create_deck(use_jokers), seed)


def draw(deck: List[Card], count: int) -> List[Card]:
    """
    Remove up to ``count`` cards from the top (end) of the deck.

    An exhausted deck yields a short or empty list rather than an error.
    """
    drawn = []
    while len(drawn) < count and deck:
        drawn.append(deck.pop())
    return drawn


def refill_hand(player: Player, deck: List[Card], size: int) -> int:
    """Draw into the player's hand until it holds ``size`` cards. Returns cards drawn."""
    drawn = draw(deck, max(0, size - len(player.hand)))
    player.hand.extend(drawn)
    return len(drawn)


def deal_cards(deck: List[Card], players: List[Player], face_down: int, hand: int) -> None:
    """
    Deal face-down cards and a setup hand to every player.

    Face-down cards are dealt first, matching how a table deals them.
    """
    for player in players:
        player.hand = []
        player.face_up_cards = []
        player.face_down_cards = draw(deck, face_down)
        player.setup_complete = False
        player.hand.extend(draw(deck, hand))
