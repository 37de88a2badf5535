"""
Validation of card selections sent by players.
"""

from typing import List, Optional, Sequence, Tuple

from .constants import CARD_SOURCES, SOURCE_FACE_DOWN, SOURCE_FACE_UP, SOURCE_HAND
from .errors import INVALID_SELECTION
from .models import Card, CardRef, Player
from .rules import RuleConfig

Selection = List[Tuple[CardRef, Card]]


class ValidationResult:
    """Result of selection validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        selection: Optional[Selection] = None,
        blind: bool = False
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.selection = selection or []
        self.blind = blind

    @property
    def cards(self) -> List[Card]:
        return [card for _, card in self.selection]

    @classmethod
    def success(cls, selection: Selection, blind: bool = False) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, selection=selection, blind=blind)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def resolve_ref(player: Player, ref: CardRef) -> Optional[Card]:
    """Look up the card a reference points at, or None if there is no such card."""
    if ref.source not in CARD_SOURCES:
        return None
    cards = player.cards_in(ref.source)
    if 0 <= ref.index < len(cards):
        return cards[ref.index]
    return None


def validate_selection(player: Player, refs: Sequence[CardRef], rules: RuleConfig) -> ValidationResult:
    """
    Resolve and validate the cards a player wants to play.

    References to cards that don't exist are dropped, so a play can end
    up smaller than requested.

    Args:
        player: Player making the play
        refs: Card references in play order
        rules: Active rule configuration

    Returns:
        ValidationResult with the resolved selection
    """
    if len(set(refs)) != len(refs):
        return ValidationResult.error(INVALID_SELECTION, "The same card was selected twice")

    selection = []
    for ref in refs:
        card = resolve_ref(player, ref)
        if card is not None:
            selection.append((ref, card))

    if not selection:
        return ValidationResult.error(INVALID_SELECTION, "No cards selected")

    sources = {ref.source for ref, _ in selection}
    blind = SOURCE_FACE_DOWN in sources
    if blind and len(selection) > 1:
        return ValidationResult.error(
            INVALID_SELECTION,
            "A face-down card must be played on its own"
        )

    if rules.enforce_source_order:
        if SOURCE_FACE_UP in sources and player.hand:
            return ValidationResult.error(
                INVALID_SELECTION,
                "Face-up cards can only be played once your hand is empty"
            )
        if blind and (player.hand or player.face_up_cards):
            return ValidationResult.error(
                INVALID_SELECTION,
                "Face-down cards can only be played once your hand and face-up cards are gone"
            )

    return ValidationResult.success(selection, blind=blind)


def validate_setup_selection(player: Player, indices: Sequence[int], count: int) -> ValidationResult:
    """Check a face-up selection: exactly ``count`` distinct hand positions."""
    if len(indices) != count:
        return ValidationResult.error(INVALID_SELECTION, f"Select exactly {count} cards")
    if len(set(indices)) != len(indices):
        return ValidationResult.error(INVALID_SELECTION, "The same card was selected twice")

    selection = []
    for index in indices:
        ref = CardRef(source=SOURCE_HAND, index=index)
        card = resolve_ref(player, ref)
        if card is None:
            return ValidationResult.error(INVALID_SELECTION, f"No card at hand position {index}")
        selection.append((ref, card))

    return ValidationResult.success(selection)
