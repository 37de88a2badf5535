"""Main game engine: room lifecycle, setup, turn order and card play"""

import functools
import logging
import random
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from . import errors
from .comparator import effective_top_card, is_legal_play
from .constants import (
    COUNTER_CLOCKWISE, INVISIBLE_RANK, LOG_GAME_STARTED, LOG_SETUP_COMPLETE,
    LOG_SPECIAL_RULES, ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH, PHASE_ACTIVE, PHASE_SETUP
)
from .effects import place_card, process_effect
from .errors import GameError, raise_error
from .models import Card, CardRef, GameState, Player, Room
from .rules import RuleConfig, default_rules
from .shuffle import build_deck, deal_cards, refill_hand
from .validate import Selection, validate_selection, validate_setup_selection

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of a player action. Failures leave the room untouched."""
    success: bool
    room: Optional[Room] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, room: Room) -> 'ActionResult':
        return cls(success=True, room=room)

    @classmethod
    def failure(cls, error_code: str, error_message: str) -> 'ActionResult':
        return cls(success=False, error_code=error_code, error_message=error_message)


class RoomStore:
    """Registry of live rooms keyed by room code."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rooms: Dict[str, Room] = {}
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

    def __contains__(self, code: str) -> bool:
        return code in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def generate_code(self) -> str:
        """Pick an unused room code."""
        while True:
            code = ''.join(self._rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
            if code not in self._rooms:
                return code

    def create(self) -> Room:
        with self._lock:
            room = Room(code=self.generate_code())
            self._rooms[room.code] = room
            return room

    def get(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    def delete(self, code: str) -> None:
        with self._lock:
            self._rooms.pop(code, None)

    def rooms_for(self, player_id: str) -> List[Room]:
        return [room for room in self if player_id in room.players]


def room_action(method):
    """Serialize an action on its room and turn rule violations into a failed result."""
    @functools.wraps(method)
    def wrapper(self, code: str, *args, **kwargs) -> ActionResult:
        lock = self.room_locks.get(code)
        if lock is None:
            return ActionResult.failure(errors.ROOM_NOT_FOUND, "Room not found")
        with lock:
            try:
                return method(self, code, *args, **kwargs)
            except GameError as e:
                logger.info(f"Rejected {method.__name__} in room {code}: {e}")
                return ActionResult.failure(e.code, e.message)
    return wrapper


class ShitheadEngine:
    def __init__(self, rules: Optional[RuleConfig] = None, store: Optional[RoomStore] = None):
        self.rules = rules or default_rules
        self.store = store or RoomStore()
        self.room_locks: Dict[str, threading.Lock] = {}

    def get_room(self, code: str) -> Optional[Room]:
        return self.store.get(code)

    def rooms_for(self, player_id: str) -> List[Room]:
        return self.store.rooms_for(player_id)

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------

    def create_room(self, player_id: str, name: str) -> ActionResult:
        """Create a room with the creator as its only player and host."""
        room = self.store.create()
        self.room_locks[room.code] = threading.Lock()
        with self.room_locks[room.code]:
            self._add_player(room, player_id, name)
        logger.info(f"Room {room.code} created by {name} ({player_id})")
        return ActionResult.ok(room)

    @room_action
    def join_room(self, code: str, player_id: str, name: str) -> ActionResult:
        room = self._require_room(code)
        if room.game_state.started:
            raise_error(errors.GAME_STARTED, "Game already started")
        if player_id in room.players:
            raise_error(errors.ALREADY_IN_ROOM, "Already in this room")
        if len(room.players) >= self.rules.max_players:
            raise_error(errors.ROOM_FULL, "Room is full")

        self._add_player(room, player_id, name)
        logger.info(f"{name} ({player_id}) joined room {code}")
        return ActionResult.ok(room)

    @room_action
    def start_game(self, code: str, player_id: str, seed: Optional[int] = None) -> ActionResult:
        """Shuffle, deal and move the room into the setup phase."""
        room = self._require_room(code)
        self._require_player(room, player_id)
        if room.host != player_id:
            raise_error(errors.NOT_HOST, "Only the host can start the game")
        if room.game_state.started:
            raise_error(errors.GAME_STARTED, "Game already started")
        if not self.rules.validate_player_count(len(room.players)):
            raise_error(
                errors.NOT_ENOUGH_PLAYERS,
                f"Need {self.rules.min_players} to {self.rules.max_players} players"
            )

        state = room.game_state
        state.started = True
        state.setup_phase = True
        state.deck = build_deck(self.rules.use_jokers, seed)
        state.discard_pile = []
        state.out_of_play = []
        state.player_order = list(room.players.keys())
        state.current_player_index = 0
        state.direction = 1
        state.invisible_card = None
        state.winner = None

        deal_cards(
            state.deck,
            list(room.players.values()),
            face_down=self.rules.face_down_count,
            hand=self.rules.setup_hand_size,
        )

        state.game_log.append(LOG_GAME_STARTED)
        logger.info(f"Game started in room {code} with {len(state.player_order)} players")
        return ActionResult.ok(room)

    @room_action
    def complete_setup(self, code: str, player_id: str, indices: Sequence[int]) -> ActionResult:
        """Move the chosen hand cards face-up; the game begins once everyone has chosen."""
        room = self._require_room(code)
        player = self._require_player(room, player_id)
        if room.phase != PHASE_SETUP:
            raise_error(errors.WRONG_PHASE, "Game is not in the setup phase")
        if player.setup_complete:
            raise_error(errors.SETUP_ALREADY_COMPLETE, "Setup already complete")

        validation = validate_setup_selection(player, indices, self.rules.face_up_count)
        if not validation.valid:
            raise_error(validation.error_code, validation.error_message)

        player.face_up_cards.extend(self._take_cards(player, validation.selection))
        player.setup_complete = True
        self._finish_setup_if_ready(room)
        return ActionResult.ok(room)

    # ------------------------------------------------------------------
    # Play
    # ------------------------------------------------------------------

    @room_action
    def play_cards(self, code: str, player_id: str, refs: Sequence[CardRef]) -> ActionResult:
        """
        Play one or more cards from any of the player's collections.

        A face-down card is only judged after it is revealed; if it can't
        be played the player picks up the pile and the turn moves on.
        """
        room = self._require_room(code)
        player = self._require_player(room, player_id)
        self._require_turn(room, player_id)

        validation = validate_selection(player, refs, self.rules)
        if not validation.valid:
            raise_error(validation.error_code, validation.error_message)

        cards = validation.cards
        top_card = effective_top_card(room.game_state)
        legal = is_legal_play(cards, top_card)
        if not legal and not validation.blind:
            raise_error(errors.ILLEGAL_PLAY, f"Cannot play {cards[0]} on {top_card}")

        self._take_cards(player, validation.selection)

        if not legal:
            self._blind_play_penalty(room, player, cards[0])
        else:
            self._resolve_play(room, player, cards)
        return ActionResult.ok(room)

    @room_action
    def pick_up_pile(self, code: str, player_id: str) -> ActionResult:
        room = self._require_room(code)
        player = self._require_player(room, player_id)
        self._require_turn(room, player_id)

        state = room.game_state
        self._collect_pile(state, player)
        state.game_log.append(f"{player.name} picked up the pile")
        self._next_turn(state)
        return ActionResult.ok(room)

    # ------------------------------------------------------------------
    # Departure
    # ------------------------------------------------------------------

    @room_action
    def leave_room(self, code: str, player_id: str) -> ActionResult:
        room = self._require_room(code)
        self._require_player(room, player_id)
        self._remove_player(room, player_id)
        return ActionResult.ok(room)

    def disconnect(self, player_id: str) -> List[str]:
        """Remove a player from every room they are in. Returns the affected room codes."""
        codes = [room.code for room in self.rooms_for(player_id)]
        for code in codes:
            self.leave_room(code, player_id)
        return codes

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_room(self, code: str) -> Room:
        room = self.store.get(code)
        if not room:
            raise_error(errors.ROOM_NOT_FOUND, "Room not found")
        return room

    def _require_player(self, room: Room, player_id: str) -> Player:
        player = room.players.get(player_id)
        if not player:
            raise_error(errors.NOT_IN_ROOM, "Player not in room")
        return player

    def _require_turn(self, room: Room, player_id: str) -> None:
        if room.phase != PHASE_ACTIVE:
            raise_error(errors.WRONG_PHASE, "Game is not in progress")
        if room.game_state.current_player_id != player_id:
            raise_error(errors.NOT_YOUR_TURN, "It's not your turn")

    def _add_player(self, room: Room, player_id: str, name: str) -> Player:
        player = Player(id=player_id, name=name)
        room.players[player_id] = player
        if not room.host:
            room.host = player_id
        return player

    def _take_cards(self, player: Player, selection: Selection) -> List[Card]:
        """Remove the selected cards from the player, returning them in selection order."""
        # Highest index first so earlier positions stay valid
        for ref, card in sorted(selection, key=lambda item: item[0].index, reverse=True):
            removed = player.cards_in(ref.source).pop(ref.index)
            assert removed is card
        return [card for _, card in selection]

    def _collect_pile(self, state: GameState, player: Player) -> None:
        """Move the pending invisible card and the whole pile into the player's hand."""
        if state.invisible_card is not None:
            player.hand.append(state.invisible_card)
            state.invisible_card = None
        player.hand.extend(state.discard_pile)
        state.discard_pile = []

    def _resolve_play(self, room: Room, player: Player, cards: List[Card]) -> None:
        state = room.game_state
        for card in cards:
            place_card(room, player, card)

        advance = process_effect(room, player, cards[-1], self.rules)

        refill_hand(player, state.deck, self.rules.hand_size)

        card_names = ', '.join(str(card) for card in cards if card.rank != INVISIBLE_RANK)
        if card_names:
            state.game_log.append(f"{player.name} played {card_names}")

        if self._check_winner(room, player):
            return
        if advance:
            self._next_turn(state)

    def _blind_play_penalty(self, room: Room, player: Player, card: Card) -> None:
        state = room.game_state
        player.hand.append(card)
        self._collect_pile(state, player)
        state.game_log.append(f"{player.name} played {card} face-down but had to pick up the pile")
        self._next_turn(state)

    def _check_winner(self, room: Room, player: Player) -> bool:
        if player.total_cards() > 0:
            return False
        state = room.game_state
        state.winner = player.id
        state.started = False
        state.setup_phase = False
        state.game_log.append(f"{player.name} wins!")
        logger.info(f"{player.name} won in room {room.code}")
        return True

    def _next_turn(self, state: GameState) -> None:
        player_count = len(state.player_order)
        state.current_player_index = (state.current_player_index + state.direction) % player_count
        assert 0 <= state.current_player_index < player_count

    def _finish_setup_if_ready(self, room: Room) -> None:
        state = room.game_state
        if not state.setup_phase:
            return
        if not all(player.setup_complete for player in room.players.values()):
            return

        for player in room.players.values():
            refill_hand(player, state.deck, self.rules.hand_size)

        state.setup_phase = False
        state.current_player_index = 0
        state.game_log.append(LOG_SETUP_COMPLETE)
        state.game_log.append(LOG_SPECIAL_RULES)
        logger.info(f"Setup complete in room {room.code}")

    def _remove_player(self, room: Room, player_id: str) -> None:
        state = room.game_state
        player = room.players.pop(player_id)
        state.out_of_play.extend(player.all_cards())
        player.hand, player.face_up_cards, player.face_down_cards = [], [], []

        if player_id in state.player_order:
            removed_index = state.player_order.index(player_id)
            state.player_order.pop(removed_index)
            self._repair_turn_pointer(state, removed_index)

        if room.host == player_id:
            room.host = next(iter(room.players), None)

        logger.info(f"{player.name} ({player_id}) left room {room.code}")

        if not room.players:
            self.store.delete(room.code)
            self.room_locks.pop(room.code, None)
            logger.info(f"Room {room.code} is empty and was removed")
            return

        state.game_log.append(f"{player.name} left the game")
        if not state.started:
            return
        if len(state.player_order) < self.rules.min_players:
            state.started = False
            state.setup_phase = False
            state.game_log.append("Not enough players left, game over")
        elif state.setup_phase:
            self._finish_setup_if_ready(room)

    def _repair_turn_pointer(self, state: GameState, removed_index: int) -> None:
        """Keep the turn on a present player after someone leaves the order."""
        player_count = len(state.player_order)
        if player_count == 0:
            state.current_player_index = 0
            return
        current = state.current_player_index
        if removed_index < current:
            current -= 1
        elif removed_index == current and state.direction == COUNTER_CLOCKWISE:
            current -= 1
        state.current_player_index = current % player_count
        assert 0 <= state.current_player_index < player_count
