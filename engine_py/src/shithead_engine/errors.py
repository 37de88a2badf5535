# engine_py/src/shithead_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
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

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
