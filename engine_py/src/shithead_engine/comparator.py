"""
Play legality checks against the top of the discard pile.
"""

from typing import Optional, Sequence

from .constants import INVISIBLE_RANK, SEVEN_RANK, WILDCARD_RANKS, rank_value
from .models import Card, GameState

# Stand-in top card while an invisible 3 is pending
INVISIBLE_TOP_CARD = Card(suit=None, rank=INVISIBLE_RANK, value=rank_value(INVISIBLE_RANK), color=None)


def is_wildcard(card: Card) -> bool:
    """Check if a card can be played on anything."""
    return card.rank in WILDCARD_RANKS


def is_legal_play(cards: Sequence[Card], top_card: Optional[Card]) -> bool:
    """
    Check whether a set of cards may be played on ``top_card``.

    Only the first card is compared; a multi-card play is a set whose
    rank is decided by its first card.

    Args:
        cards: Cards being played, in play order
        top_card: Effective top of the pile, or None for an empty pile

    Returns:
        True if the play is legal
    """
    if not cards:
        return False

    # Anything goes on an empty pile
    if top_card is None:
        return True

    first_card = cards[0]

    if is_wildcard(first_card):
        return True

    # 7 rule: next card must be 7 or lower
    if top_card.rank == SEVEN_RANK:
        return first_card.value <= top_card.value

    return first_card.value >= top_card.value


def effective_top_card(state: GameState) -> Optional[Card]:
    """
    Get the card the next play is judged against.

    A pending invisible 3 makes the pile count as topped by a 3.
    """
    if state.invisible_card is not None:
        return INVISIBLE_TOP_CARD
    return state.top_card
