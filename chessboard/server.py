from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import asyncio
import json
import logging
from typing import Any, Dict, Set

from chessboard import coordinates
from chessboard.config import Settings, configure_logging
from chessboard.game_state import ChessGame
from chessboard.oracle import create_oracle

logger = logging.getLogger(__name__)


class MoveRequest(BaseModel):
    from_row: int = Field(..., alias="fromRow")
    from_col: int = Field(..., alias="fromCol")
    to_row: int = Field(..., alias="toRow")
    to_col: int = Field(..., alias="toCol")


# ---- Game storage ----
Room = Dict[str, Any]


class GameRegistry:
    """One ChessGame per game id, created on first use."""

    def __init__(self, rules: str = "standard") -> None:
        self.rules = rules
        self.rooms: Dict[str, Room] = {}

    def get_room(self, game_id: str) -> Room:
        room = self.rooms.get(game_id)
        if room is None:
            room = {
                "game": ChessGame(create_oracle(self.rules)),
                "clients": set(),      # sockets watching this game
            }
            self.rooms[game_id] = room
            logger.info("Created game %s (%s rules)", game_id, self.rules)
        return room

    def get_game(self, game_id: str) -> ChessGame:
        return self.get_room(game_id)["game"]


async def broadcast(room: Room) -> None:
    clients: Set[WebSocket] = room["clients"]
    if not clients:
        return

    msg = json.dumps(room["game"].state_payload())
    await asyncio.gather(
        *[ws.send_text(msg) for ws in list(clients)],
        return_exceptions=True,
    )


def apply_ws_move(game: ChessGame, msg: dict) -> bool:
    """A WS move carries either grid coordinates or algebraic squares."""
    if msg.get("from") and msg.get("to"):
        return game.make_move(str(msg["from"]), str(msg["to"]), msg.get("promotion"))

    try:
        return game.move_piece(
            int(msg["fromRow"]), int(msg["fromCol"]),
            int(msg["toRow"]), int(msg["toCol"]),
        )
    except (KeyError, TypeError, ValueError, OverflowError):
        return False


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    registry = GameRegistry(settings.rules)

    app = FastAPI(title="chessboard")
    app.state.registry = registry
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/coordinates/{row}/{col}")
    async def square_name(row: int, col: int) -> dict:
        if not coordinates.is_on_board(row, col):
            raise HTTPException(status_code=422, detail=f"({row}, {col}) is off the board")
        return {"square": coordinates.format_position(row, col)}

    # ---- Game routes ----
    @app.get("/games/{game_id}")
    async def game_state(game_id: str) -> dict:
        return registry.get_game(game_id).state_payload()

    @app.get("/games/{game_id}/history")
    async def game_history(game_id: str) -> list:
        return [move.to_dict() for move in registry.get_game(game_id).get_move_history()]

    @app.post("/games/{game_id}/moves")
    async def move(game_id: str, request: MoveRequest) -> dict:
        room = registry.get_room(game_id)
        game: ChessGame = room["game"]
        ok = game.move_piece(request.from_row, request.from_col, request.to_row, request.to_col)
        if ok:
            await broadcast(room)
        return {"ok": ok, "state": game.state_payload()}

    @app.post("/games/{game_id}/reset")
    async def reset(game_id: str) -> dict:
        room = registry.get_room(game_id)
        room["game"].reset()
        await broadcast(room)
        return room["game"].state_payload()

    # ---- WebSocket endpoint ----
    @app.websocket("/ws/game/{game_id}")
    async def ws_game(websocket: WebSocket, game_id: str) -> None:
        await websocket.accept()

        room = registry.get_room(game_id)
        clients: Set[WebSocket] = room["clients"]
        game: ChessGame = room["game"]

        clients.add(websocket)

        # Send initial state
        await websocket.send_text(json.dumps(game.state_payload()))

        try:
            while True:
                data = await websocket.receive_text()
                try:
                    msg = json.loads(data)
                except json.JSONDecodeError:
                    msg = None
                if not isinstance(msg, dict):
                    await websocket.send_text(json.dumps(game.state_payload()))
                    continue

                msg_type = msg.get("type")

                if msg_type == "reset":
                    game.reset()
                    await broadcast(room)
                    continue

                if msg_type == "move":
                    if apply_ws_move(game, msg):
                        await broadcast(room)
                    else:
                        await websocket.send_text(json.dumps(game.state_payload()))
                    continue

                # Unknown message type: send current state back
                await websocket.send_text(json.dumps(game.state_payload()))

        except WebSocketDisconnect:
            logger.debug("Socket left game %s", game_id)
        finally:
            clients.discard(websocket)

    return app


# Environment settings are only read by main()
app = create_app(Settings())


def main() -> None:
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
