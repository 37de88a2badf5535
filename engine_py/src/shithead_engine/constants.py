"""Game constants and utilities"""

from typing import Dict, FrozenSet, List

SUITS = ['♠', '♥', '♦', '♣']
RED_SUITS = {'♥', '♦'}
RANKS = ['2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A']

JOKER = 'JOKER'
JOKER_SUIT = '🃏'
JOKER_COLORS = ['black', 'red']

RANK_VALUES: Dict[str, int] = {
    '2': 2, '3': 0, '4': 4, '5': 5, '6': 6, '7': 7, '8': 8,
    '9': 9, '10': 10, 'J': 11, 'Q': 12, 'K': 13, 'A': 14, JOKER: 15,
}

# Ranks that can be played on anything
WILDCARD_RANKS: FrozenSet[str] = frozenset({'2', '3', '10', JOKER})

INVISIBLE_RANK = '3'
SEVEN_RANK = '7'

# Card sources a player can play from
SOURCE_HAND = 'hand'
SOURCE_FACE_UP = 'faceUp'
SOURCE_FACE_DOWN = 'faceDown'
CARD_SOURCES: List[str] = [SOURCE_HAND, SOURCE_FACE_UP, SOURCE_FACE_DOWN]

# Room phases
PHASE_LOBBY = 'lobby'
PHASE_SETUP = 'setup'
PHASE_ACTIVE = 'active'
PHASE_ENDED = 'ended'

CLOCKWISE = 1
COUNTER_CLOCKWISE = -1

ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'

# Game log messages
LOG_GAME_STARTED = 'Game started! Players setting up face-up cards...'
LOG_SETUP_COMPLETE = 'Setup complete! Game begins!'
LOG_SPECIAL_RULES = 'Special rules: Jokers flip direction, 3s are invisible and affect the next player'


def rank_value(rank: str) -> int:
    return RANK_VALUES[rank]


def suit_color(suit: str) -> str:
    return 'red' if suit in RED_SUITS else 'black'


def direction_name(direction: int) -> str:
    return 'clockwise' if direction == CLOCKWISE else 'counter-clockwise'
