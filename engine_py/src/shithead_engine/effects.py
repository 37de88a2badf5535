"""
Special card effects implementation.
"""

import logging
from enum import Enum
from typing import Callable, Dict

from .constants import INVISIBLE_RANK, JOKER, direction_name
from .models import Card, Player, Room
from .rules import RuleConfig

logger = logging.getLogger(__name__)


class Effect(str, Enum):
    """Effect triggered by the last card of a play."""
    RESET = "reset"            # 2
    INVISIBLE = "invisible"    # 3
    BURN = "burn"              # 10
    REVERSE = "reverse"        # JOKER
    PLAIN = "plain"


_RANK_EFFECTS = {
    '2': Effect.RESET,
    INVISIBLE_RANK: Effect.INVISIBLE,
    '10': Effect.BURN,
    JOKER: Effect.REVERSE,
}


def effect_for_rank(rank: str) -> Effect:
    """Get the special effect for a given rank."""
    return _RANK_EFFECTS.get(rank, Effect.PLAIN)


def retire_invisible_card(room: Room) -> None:
    """Take a pending invisible 3 out of play once its deferral is spent."""
    state = room.game_state
    if state.invisible_card is not None:
        state.out_of_play.append(state.invisible_card)
        state.invisible_card = None


def place_card(room: Room, player: Player, card: Card) -> None:
    """
    Put a played card where it belongs.

    A 3 never reaches the pile; it becomes the pending invisible card.
    Any other card lands on the pile and spends a pending invisible 3.
    """
    state = room.game_state
    retire_invisible_card(room)

    if card.rank == INVISIBLE_RANK:
        state.invisible_card = card
        state.game_log.append(f"{player.name} played an invisible 3")
    else:
        state.discard_pile.append(card)


def apply_burn(room: Room, player: Player, rules: RuleConfig) -> bool:
    """
    Apply Burn effect - the pile leaves the game and the same player goes again.

    Returns:
        False, the turn does not advance
    """
    state = room.game_state
    state.out_of_play.extend(state.discard_pile)
    state.discard_pile = []
    retire_invisible_card(room)
    state.game_log.append(f"{player.name} burned the pile with a 10!")
    return False


def apply_reset(room: Room, player: Player, rules: RuleConfig) -> bool:
    """
    Apply Reset effect for a 2.

    The 2 is already a wildcard; only with ``two_clears_pile`` does the
    pile underneath actually leave the game.
    """
    state = room.game_state
    if rules.two_clears_pile:
        reset_card = state.discard_pile.pop()
        state.out_of_play.extend(state.discard_pile)
        state.discard_pile = [reset_card]
    state.game_log.append(f"{player.name} reset the pile with a 2!")
    return True


def apply_reverse(room: Room, player: Player, rules: RuleConfig) -> bool:
    """Apply Reverse effect - a Joker flips the direction of play."""
    state = room.game_state
    state.direction *= -1
    state.game_log.append(
        f"{player.name} played a Joker! Direction is now {direction_name(state.direction)}"
    )
    return True


def apply_invisible(room: Room, player: Player, rules: RuleConfig) -> bool:
    """Announce who has to play against the invisible 3."""
    state = room.game_state
    order = state.player_order
    if order:
        next_index = (state.current_player_index + state.direction) % len(order)
        next_player = room.players.get(order[next_index])
        if next_player:
            state.game_log.append(
                f"{next_player.name} must play as if there's a 3 on the pile (invisible card effect)"
            )
    return True


def apply_plain(room: Room, player: Player, rules: RuleConfig) -> bool:
    return True


EffectHandler = Callable[[Room, Player, RuleConfig], bool]

EFFECT_HANDLERS: Dict[Effect, EffectHandler] = {
    Effect.RESET: apply_reset,
    Effect.INVISIBLE: apply_invisible,
    Effect.BURN: apply_burn,
    Effect.REVERSE: apply_reverse,
    Effect.PLAIN: apply_plain,
}


def process_effect(room: Room, player: Player, card: Card, rules: RuleConfig) -> bool:
    """
    Resolve the effect of the last card played.

    Args:
        room: Room being played in
        player: Player who made the play
        card: Last card of the play
        rules: Active rule configuration

    Returns:
        True if the turn should pass to the next player
    """
    effect = effect_for_rank(card.rank)
    logger.debug(f"Room {room.code}: {player.name} triggers {effect.value} with {card}")
    return EFFECT_HANDLERS[effect](room, player, rules)
