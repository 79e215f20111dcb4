"""Socket.IO event names shared with the browser client."""

# Client -> Server
CREATE_ROOM = "createRoom"
JOIN_ROOM = "joinRoom"
LEAVE_ROOM = "leaveRoom"
START_GAME = "startGame"
CHOOSE_WORD = "chooseWord"
DRAW = "draw"
UNDO_STROKE = "undoStroke"
CLEAR_CANVAS = "clearCanvas"
CHAT_MESSAGE = "chatMessage"

# Server -> Client (private to the requester)
GAME_STATE = "gameState"
SYNC_STROKES = "syncStrokes"
CHAT_SYNC = "chatSync"
ERROR_MESSAGE = "errorMessage"

ERROR_TEXT = {
    "invalid_payload": "Invalid request.",
    "room_not_found": "Room not found!",
    "not_in_room": "You are not in this room.",
    "not_enough_players": "Need at least {min_players} players!",
    "choose_not_allowed": "You can't choose a word right now.",
}
