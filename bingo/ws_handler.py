"""WebSocket endpoint and message routing."""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from bingo.models import (
    AdminLoginMsg,
    CreateGameMsg,
    DeleteGameMsg,
    EndGameMsg,
    ErrorMsg,
    JoinGameMsg,
    LeaveGameMsg,
    ListGamesMsg,
    NewBoardMsg,
    ReconnectMsg,
    SetCellMsg,
    StartGameMsg,
    WatchGameMsg,
    parse_client_message,
)
from bingo.session import game_manager

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    try:
        while True:
            try:
                data = json.loads(await ws.receive_text())
            except json.JSONDecodeError:
                data = None
            msg = parse_client_message(data) if isinstance(data, dict) else None
            if msg is None:
                await ws.send_json(ErrorMsg(message="Unknown or invalid message").model_dump())
                continue

            if isinstance(msg, AdminLoginMsg):
                await game_manager.admin_login(ws, msg.email, msg.password)

            elif isinstance(msg, CreateGameMsg):
                await game_manager.create_game(
                    ws, msg.name, msg.language, msg.grid_size, msg.win_condition.to_condition()
                )

            elif isinstance(msg, ListGamesMsg):
                await game_manager.list_games(ws)

            elif isinstance(msg, WatchGameMsg):
                await game_manager.watch_game(ws, msg.game_id, msg.sort_by, msg.sort_order)

            elif isinstance(msg, StartGameMsg):
                await game_manager.start_game(ws, msg.game_id)

            elif isinstance(msg, EndGameMsg):
                await game_manager.end_game(ws, msg.game_id)

            elif isinstance(msg, DeleteGameMsg):
                await game_manager.delete_game(ws, msg.game_id)

            elif isinstance(msg, JoinGameMsg):
                await game_manager.join_game(ws, msg.game_id, msg.name)

            elif isinstance(msg, SetCellMsg):
                await game_manager.set_cell(ws, msg.index, msg.value, msg.commit)

            elif isinstance(msg, NewBoardMsg):
                await game_manager.new_board(ws)

            elif isinstance(msg, LeaveGameMsg):
                await game_manager.leave_game(ws)

            elif isinstance(msg, ReconnectMsg):
                await game_manager.reconnect(ws, msg.game_id, msg.player_token)
    except WebSocketDisconnect:
        pass
    finally:
        await game_manager.handle_disconnect(ws)
