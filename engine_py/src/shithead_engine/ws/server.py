"""
WebSocket connection handling for the Shithead game server.
"""

import logging
import uuid
from typing import Dict, Optional, Set

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from ..engine import ActionResult, ShitheadEngine
from ..serialization import serialize_room
from .events import (
    parse_inbound_event, encode_event, create_error_event, create_room_created_event,
    create_room_joined_event, create_game_state_event, ErrorCode, OutboundEvent,
    CreateRoomEvent, JoinRoomEvent, StartGameEvent, CompleteSetupEvent,
    PlayCardsEvent, PickUpPileEvent, LeaveRoomEvent
)

logger = logging.getLogger(__name__)

INVALID_CARD_PLAY = "Invalid card play"


class ConnectionManager:
    """Tracks open sockets and which rooms they broadcast to."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.room_connections: Dict[str, Set[str]] = {}

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = str(uuid.uuid4())
        self.active_connections[connection_id] = websocket
        logger.info(f"Player {connection_id} connected")
        return connection_id

    def disconnect(self, connection_id: str):
        self.active_connections.pop(connection_id, None)
        for code in list(self.room_connections):
            self.remove_from_room(connection_id, code)
        logger.info(f"Player {connection_id} disconnected")

    def add_to_room(self, connection_id: str, room_code: str):
        self.room_connections.setdefault(room_code, set()).add(connection_id)

    def remove_from_room(self, connection_id: str, room_code: str):
        members = self.room_connections.get(room_code)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self.room_connections[room_code]

    def members(self, room_code: str) -> Set[str]:
        return set(self.room_connections.get(room_code, set()))

    def connection_count(self) -> int:
        return len(self.active_connections)

    async def send_personal_message(self, event: OutboundEvent, connection_id: str) -> bool:
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return False
        try:
            await websocket.send_text(encode_event(event))
            return True
        except Exception as e:
            logger.error(f"Error sending message to {connection_id}: {e}")
            return False


class GameServer:
    """Routes inbound socket events to the engine and broadcasts the results."""

    def __init__(self, engine: Optional[ShitheadEngine] = None):
        self.engine = engine or ShitheadEngine()
        self.connection_manager = ConnectionManager()

    async def handle_websocket(self, websocket: WebSocket):
        connection_id = await self.connection_manager.connect(websocket)

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                raw_data = message.get("text")
                if raw_data is None:
                    await self.send_error(connection_id, ErrorCode.INVALID_EVENT, "Expected a text frame")
                    continue
                await self.handle_message(raw_data, connection_id)
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected for player {connection_id}")
        except Exception as e:
            logger.error(f"WebSocket error for player {connection_id}: {e}")
        finally:
            await self.handle_disconnect(connection_id)

    async def handle_message(self, raw_data: str, connection_id: str):
        try:
            event = parse_inbound_event(orjson.loads(raw_data))
        except (orjson.JSONDecodeError, ValueError) as e:
            await self.send_error(connection_id, ErrorCode.INVALID_EVENT, str(e))
            return

        try:
            await self.handle_event(event, connection_id)
        except Exception as e:
            logger.exception(f"Error handling {event.type.value} from {connection_id}: {e}")
            await self.send_error(connection_id, ErrorCode.INTERNAL, "Internal server error")

    async def handle_event(self, event, connection_id: str):
        """Dispatch a parsed event to its handler."""
        if isinstance(event, CreateRoomEvent):
            await self.create_room(event, connection_id)
        elif isinstance(event, JoinRoomEvent):
            await self.join_room(event, connection_id)
        elif isinstance(event, StartGameEvent):
            result = self.engine.start_game(event.room_code, connection_id)
            await self.finish_action(result, event.room_code, connection_id)
        elif isinstance(event, CompleteSetupEvent):
            result = self.engine.complete_setup(event.room_code, connection_id, event.indices())
            await self.finish_action(result, event.room_code, connection_id)
        elif isinstance(event, PlayCardsEvent):
            result = self.engine.play_cards(event.room_code, connection_id, event.refs())
            await self.finish_action(result, event.room_code, connection_id, INVALID_CARD_PLAY)
        elif isinstance(event, PickUpPileEvent):
            result = self.engine.pick_up_pile(event.room_code, connection_id)
            await self.finish_action(result, event.room_code, connection_id)
        elif isinstance(event, LeaveRoomEvent):
            await self.leave_room(event, connection_id)
        else:
            raise ValueError(f"Unhandled event type: {type(event)}")

    async def create_room(self, event: CreateRoomEvent, connection_id: str):
        result = self.engine.create_room(connection_id, event.display_name)
        room_code = result.room.code
        self.connection_manager.add_to_room(connection_id, room_code)
        await self.connection_manager.send_personal_message(
            create_room_created_event(room_code), connection_id
        )
        await self.broadcast_state(room_code)

    async def join_room(self, event: JoinRoomEvent, connection_id: str):
        result = self.engine.join_room(event.room_code, connection_id, event.display_name)
        if not result.success:
            await self.send_error(connection_id, result.error_code, result.error_message)
            return

        self.connection_manager.add_to_room(connection_id, event.room_code)
        await self.connection_manager.send_personal_message(
            create_room_joined_event(event.room_code, result.room.host == connection_id),
            connection_id
        )
        await self.broadcast_state(event.room_code)

    async def leave_room(self, event: LeaveRoomEvent, connection_id: str):
        result = self.engine.leave_room(event.room_code, connection_id)
        if not result.success:
            await self.send_error(connection_id, result.error_code, result.error_message)
            return
        self.connection_manager.remove_from_room(connection_id, event.room_code)
        await self.broadcast_state(event.room_code)

    async def handle_disconnect(self, connection_id: str):
        """Remove a closed connection from every room it was playing in."""
        self.connection_manager.disconnect(connection_id)
        for room_code in self.engine.disconnect(connection_id):
            await self.broadcast_state(room_code)

    async def finish_action(
        self,
        result: ActionResult,
        room_code: str,
        connection_id: str,
        failure_message: Optional[str] = None
    ):
        if result.success:
            await self.broadcast_state(room_code)
            return
        logger.warning(f"Action from {connection_id} in room {room_code} failed: {result.error_message}")
        await self.send_error(
            connection_id,
            result.error_code,
            failure_message or result.error_message,
            detail=result.error_message if failure_message else None
        )

    async def send_error(self, connection_id: str, code, message: str, detail: Optional[str] = None):
        await self.connection_manager.send_personal_message(
            create_error_event(code, message, detail), connection_id
        )

    async def broadcast_state(self, room_code: str):
        """Send every room member its own snapshot of the room."""
        room = self.engine.get_room(room_code)
        if room is None:
            return

        for connection_id in self.connection_manager.members(room_code):
            event = create_game_state_event(serialize_room(room, connection_id))
            await self.connection_manager.send_personal_message(event, connection_id)
