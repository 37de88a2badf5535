"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models import CardRef


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_ROOM = "createRoom"
    JOIN_ROOM = "joinRoom"
    START_GAME = "startGame"
    COMPLETE_SETUP = "completeSetup"
    PLAY_CARDS = "playCards"
    PICK_UP_PILE = "pickUpPile"
    LEAVE_ROOM = "leaveRoom"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    ROOM_CREATED = "roomCreated"
    ROOM_JOINED = "roomJoined"
    GAME_STATE_UPDATE = "gameStateUpdate"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    GAME_STARTED = "GAME_STARTED"
    NOT_HOST = "NOT_HOST"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    ALREADY_IN_ROOM = "ALREADY_IN_ROOM"
    WRONG_PHASE = "WRONG_PHASE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    SETUP_ALREADY_COMPLETE = "SETUP_ALREADY_COMPLETE"
    INVALID_SELECTION = "INVALID_SELECTION"
    ILLEGAL_PLAY = "ILLEGAL_PLAY"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    model_config = ConfigDict(populate_by_name=True)

    type: EventType


class RoomEvent(BaseEvent):
    """Event addressed to an existing room."""
    room_code: str = Field(..., alias="roomCode", min_length=1, max_length=12)


class CreateRoomEvent(BaseEvent):
    """Create room event."""
    type: EventType = EventType.CREATE_ROOM
    display_name: str = Field(..., alias="displayName", min_length=1, max_length=30)


class JoinRoomEvent(RoomEvent):
    """Join room event."""
    type: EventType = EventType.JOIN_ROOM
    display_name: str = Field(..., alias="displayName", min_length=1, max_length=30)


class StartGameEvent(RoomEvent):
    """Start game event."""
    type: EventType = EventType.START_GAME


class SelectedCard(BaseModel):
    """Hand position picked during setup."""
    index: int = Field(..., ge=0)


class CompleteSetupEvent(RoomEvent):
    """Face-up selection event."""
    type: EventType = EventType.COMPLETE_SETUP
    selected_cards: List[SelectedCard] = Field(..., alias="selectedCards", min_length=1, max_length=6)

    def indices(self) -> List[int]:
        return [selected.index for selected in self.selected_cards]


class CardIndex(BaseModel):
    """Reference to a card in one of the player's collections."""
    model_config = ConfigDict(populate_by_name=True)

    source: Literal["hand", "faceUp", "faceDown"] = Field(..., alias="type")
    index: int = Field(..., ge=0)

    def to_ref(self) -> CardRef:
        return CardRef(source=self.source, index=self.index)


class PlayCardsEvent(RoomEvent):
    """Play cards event."""
    type: EventType = EventType.PLAY_CARDS
    card_indices: List[CardIndex] = Field(..., alias="cardIndices", min_length=1, max_length=54)

    def refs(self) -> List[CardRef]:
        return [card_index.to_ref() for card_index in self.card_indices]


class PickUpPileEvent(RoomEvent):
    """Pick up pile event."""
    type: EventType = EventType.PICK_UP_PILE


class LeaveRoomEvent(RoomEvent):
    """Leave room event."""
    type: EventType = EventType.LEAVE_ROOM


# Union type for all inbound events
InboundEvent = Union[
    CreateRoomEvent,
    JoinRoomEvent,
    StartGameEvent,
    CompleteSetupEvent,
    PlayCardsEvent,
    PickUpPileEvent,
    LeaveRoomEvent
]


# Outbound event models
class OutboundEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: OutboundEventType
    timestamp: float = Field(default_factory=time.time)


class RoomCreatedEvent(OutboundEvent):
    """Room creation confirmation, sent to the creator."""
    type: OutboundEventType = OutboundEventType.ROOM_CREATED
    room_code: str = Field(..., alias="roomCode")
    is_host: bool = Field(True, alias="isHost")


class RoomJoinedEvent(OutboundEvent):
    """Join confirmation, sent to the joining player."""
    type: OutboundEventType = OutboundEventType.ROOM_JOINED
    room_code: str = Field(..., alias="roomCode")
    is_host: bool = Field(False, alias="isHost")


class GameStateUpdateEvent(OutboundEvent):
    """Full room snapshot sent to every member after a change."""
    type: OutboundEventType = OutboundEventType.GAME_STATE_UPDATE
    room_code: str = Field(..., alias="roomCode")
    phase: str
    players: List[Dict[str, Any]]
    game_state: Dict[str, Any] = Field(..., alias="gameState")
    is_host: bool = Field(..., alias="isHost")
    effective_top_card: Optional[Dict[str, Any]] = Field(None, alias="effectiveTopCard")


class ErrorEvent(OutboundEvent):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    detail: Optional[str] = None


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_map = {
        EventType.CREATE_ROOM: CreateRoomEvent,
        EventType.JOIN_ROOM: JoinRoomEvent,
        EventType.START_GAME: StartGameEvent,
        EventType.COMPLETE_SETUP: CompleteSetupEvent,
        EventType.PLAY_CARDS: PlayCardsEvent,
        EventType.PICK_UP_PILE: PickUpPileEvent,
        EventType.LEAVE_ROOM: LeaveRoomEvent,
    }

    event_class = event_map[event_type]

    try:
        return event_class.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e.errors(include_url=False)}")


def encode_event(event: OutboundEvent) -> str:
    """Serialize an outbound event to JSON text with camelCase keys."""
    return orjson.dumps(event.model_dump(mode="json", by_alias=True)).decode()


def create_error_event(code: Union[ErrorCode, str], message: str, detail: Optional[str] = None) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=ErrorCode(code), message=message, detail=detail)


def create_room_created_event(room_code: str) -> RoomCreatedEvent:
    return RoomCreatedEvent(room_code=room_code, is_host=True)


def create_room_joined_event(room_code: str, is_host: bool) -> RoomJoinedEvent:
    return RoomJoinedEvent(room_code=room_code, is_host=is_host)


def create_game_state_event(snapshot: Dict[str, Any]) -> GameStateUpdateEvent:
    """Create a game state update from a serialized room snapshot."""
    return GameStateUpdateEvent(
        room_code=snapshot["roomCode"],
        phase=snapshot["phase"],
        players=snapshot["players"],
        game_state=snapshot["gameState"],
        is_host=snapshot["isHost"],
        effective_top_card=snapshot["effectiveTopCard"],
    )
