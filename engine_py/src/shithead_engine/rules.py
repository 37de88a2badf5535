"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    use_jokers: bool = Field(
        default=True,
        description="Whether to include the two jokers in the deck"
    )
    min_players: int = Field(
        default=2,
        ge=2,
        le=6,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=6,
        ge=2,
        le=6,
        description="Maximum number of players allowed (9 cards are dealt to each)"
    )
    face_down_count: int = Field(
        default=3,
        ge=1,
        le=3,
        description="Face-down cards dealt to each player"
    )
    setup_hand_size: int = Field(
        default=6,
        ge=3,
        le=6,
        description="Hand cards dealt for the face-up selection"
    )
    face_up_count: int = Field(
        default=3,
        ge=1,
        le=3,
        description="Hand cards each player moves face-up during setup"
    )
    hand_size: int = Field(
        default=3,
        ge=1,
        le=6,
        description="Hands are refilled from the deck up to this size"
    )
    two_clears_pile: bool = Field(
        default=False,
        description="Whether a 2 physically clears the pile instead of only acting as a wildcard"
    )
    enforce_source_order: bool = Field(
        default=False,
        description="Face-up cards need an empty hand and face-down cards need no face-up cards left"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't go below the minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    @field_validator('face_up_count')
    @classmethod
    def validate_face_up_count(cls, v, info):
        """Validate the setup hand can supply the face-up cards."""
        setup_hand_size = info.data.get('setup_hand_size', 6)
        if v > setup_hand_size:
            raise ValueError(f'face_up_count ({v}) must be <= setup_hand_size ({setup_hand_size})')
        return v

    @model_validator(mode='after')
    def validate_deal_fits_deck(self):
        """Validate a full table can be dealt from one deck."""
        needed = self.max_players * self.cards_dealt_per_player()
        if needed > self.get_deck_size():
            raise ValueError(
                f'{self.max_players} players need {needed} cards, '
                f'only {self.get_deck_size()} cards in the deck'
            )
        return self

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players

    def get_deck_size(self) -> int:
        """Get the total number of cards in the deck."""
        base_deck = 52
        if self.use_jokers:
            base_deck += 2
        return base_deck

    def cards_dealt_per_player(self) -> int:
        return self.face_down_count + self.setup_hand_size


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
