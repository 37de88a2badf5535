"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional

from .constants import (
    JOKER, PHASE_ACTIVE, PHASE_ENDED, PHASE_LOBBY, PHASE_SETUP, CLOCKWISE,
    SOURCE_HAND, SOURCE_FACE_UP, SOURCE_FACE_DOWN
)


@dataclass(frozen=True)
class Card:
    suit: Optional[str]
    rank: str
    value: int
    color: Optional[str]

    @property
    def id(self) -> str:
        if self.rank == JOKER:
            return f"{JOKER}-{self.color}"
        return f"{self.rank}{self.suit or ''}"

    def __str__(self) -> str:
        return f"{self.rank}{self.suit or ''}"


@dataclass(frozen=True)
class CardRef:
    """Position of a card in one of a player's collections."""
    source: str  # hand|faceUp|faceDown
    index: int


@dataclass
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    face_up_cards: List[Card] = field(default_factory=list)
    face_down_cards: List[Card] = field(default_factory=list)  # hidden from owner until played
    setup_complete: bool = False

    def cards_in(self, source: str) -> List[Card]:
        if source == SOURCE_HAND:
            return self.hand
        if source == SOURCE_FACE_UP:
            return self.face_up_cards
        if source == SOURCE_FACE_DOWN:
            return self.face_down_cards
        raise ValueError(f"Unknown card source: {source}")

    def total_cards(self) -> int:
        return len(self.hand) + len(self.face_up_cards) + len(self.face_down_cards)

    def all_cards(self) -> List[Card]:
        return [*self.hand, *self.face_up_cards, *self.face_down_cards]


@dataclass
class GameState:
    started: bool = False
    setup_phase: bool = False
    current_player_index: int = 0
    deck: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)  # top = last element
    out_of_play: List[Card] = field(default_factory=list)  # burned piles, retired 3s, departed hands
    player_order: List[str] = field(default_factory=list)
    direction: int = CLOCKWISE  # 1 clockwise, -1 counter-clockwise
    invisible_card: Optional[Card] = None
    winner: Optional[str] = None
    game_log: List[str] = field(default_factory=list)

    @property
    def current_player_id(self) -> Optional[str]:
        if not self.player_order:
            return None
        return self.player_order[self.current_player_index % len(self.player_order)]

    @property
    def top_card(self) -> Optional[Card]:
        return self.discard_pile[-1] if self.discard_pile else None


@dataclass
class Room:
    code: str
    players: Dict[str, Player] = field(default_factory=dict)  # join order
    host: Optional[str] = None
    game_state: GameState = field(default_factory=GameState)

    @property
    def phase(self) -> str:
        state = self.game_state
        if state.started:
            return PHASE_SETUP if state.setup_phase else PHASE_ACTIVE
        if state.winner is not None:
            return PHASE_ENDED
        return PHASE_LOBBY

    def all_cards(self) -> List[Card]:
        """Every card the room currently holds, wherever it is."""
        state = self.game_state
        cards = [*state.deck, *state.discard_pile, *state.out_of_play]
        if state.invisible_card is not None:
            cards.append(state.invisible_card)
        for player in self.players.values():
            cards.extend(player.all_cards())
        return cards
