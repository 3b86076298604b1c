"""Pydantic models for the WebSocket message protocol and stored game documents."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bingo.board import DEFAULT_GRID_SIZE
from bingo.win import Blackout, Lines, WinCondition


# ---------------------------------------------------------------------------
# Win condition (shared by messages and documents)
# ---------------------------------------------------------------------------

class LinesWinCondition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["lines"] = "lines"
    lines_required: int = Field(default=1, ge=1, alias="linesRequired")

    def to_condition(self) -> WinCondition:
        return Lines(self.lines_required)


class BlackoutWinCondition(BaseModel):
    type: Literal["blackout"] = "blackout"

    def to_condition(self) -> WinCondition:
        return Blackout()


WinConditionModel = Annotated[
    LinesWinCondition | BlackoutWinCondition, Field(discriminator="type")
]


def condition_model(condition: WinCondition) -> LinesWinCondition | BlackoutWinCondition:
    if isinstance(condition, Blackout):
        return BlackoutWinCondition()
    return LinesWinCondition(lines_required=condition.required)


# ---------------------------------------------------------------------------
# Stored documents (field names as the document store keeps them)
# ---------------------------------------------------------------------------

class PlayerDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    board: list[str]
    names: dict[str, str] = Field(default_factory=dict)
    joined_at: str | None = Field(default=None, alias="joinedAt")
    # Reconnect secret; never shown to the admin view
    token: str | None = None


class GameDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    language: str = "en"
    admin_id: str | None = Field(default=None, alias="adminId")
    # Games stored before status existed were always playable
    status: Literal["pending", "active", "ended"] = "active"
    grid_size: int = Field(default=DEFAULT_GRID_SIZE, ge=1, alias="gridSize")
    win_condition: WinConditionModel = Field(
        default_factory=LinesWinCondition, alias="winCondition"
    )
    players: dict[str, PlayerDocument] = Field(default_factory=dict)
    created_at: str | None = Field(default=None, alias="createdAt")
    started_at: str | None = Field(default=None, alias="startedAt")
    ended_at: str | None = Field(default=None, alias="endedAt")


# ---------------------------------------------------------------------------
# Client → Server
# ---------------------------------------------------------------------------

class AdminLoginMsg(BaseModel):
    type: Literal["admin_login"] = "admin_login"
    email: str
    password: str


class CreateGameMsg(BaseModel):
    type: Literal["create_game"] = "create_game"
    name: str
    language: str = "en"
    grid_size: int = DEFAULT_GRID_SIZE
    win_condition: WinConditionModel = Field(default_factory=LinesWinCondition)


class ListGamesMsg(BaseModel):
    type: Literal["list_games"] = "list_games"


class WatchGameMsg(BaseModel):
    type: Literal["watch_game"] = "watch_game"
    game_id: str
    sort_by: Literal["progress", "name"] = "progress"
    sort_order: Literal["asc", "desc"] = "desc"


class StartGameMsg(BaseModel):
    type: Literal["start_game"] = "start_game"
    game_id: str


class EndGameMsg(BaseModel):
    type: Literal["end_game"] = "end_game"
    game_id: str


class DeleteGameMsg(BaseModel):
    type: Literal["delete_game"] = "delete_game"
    game_id: str


class JoinGameMsg(BaseModel):
    type: Literal["join_game"] = "join_game"
    game_id: str
    name: str


class SetCellMsg(BaseModel):
    type: Literal["set_cell"] = "set_cell"
    index: int
    value: str
    # False: only check for a duplicate while the player is still typing
    commit: bool = True


class NewBoardMsg(BaseModel):
    type: Literal["new_board"] = "new_board"


class LeaveGameMsg(BaseModel):
    type: Literal["leave_game"] = "leave_game"


class ReconnectMsg(BaseModel):
    type: Literal["reconnect"] = "reconnect"
    game_id: str
    player_token: str


ClientMessage = (
    AdminLoginMsg
    | CreateGameMsg
    | ListGamesMsg
    | WatchGameMsg
    | StartGameMsg
    | EndGameMsg
    | DeleteGameMsg
    | JoinGameMsg
    | SetCellMsg
    | NewBoardMsg
    | LeaveGameMsg
    | ReconnectMsg
)


# ---------------------------------------------------------------------------
# Server → Client
# ---------------------------------------------------------------------------

class GameSummary(BaseModel):
    game_id: str
    name: str
    language: str
    status: str
    grid_size: int
    win_condition: WinConditionModel
    player_count: int
    created_at: str | None


class PlayerProgress(BaseModel):
    player_id: str
    name: str
    filled_count: int
    completed_count: int
    has_won: bool
    names: dict[int, str]
    joined_at: str


class AdminAuthenticatedMsg(BaseModel):
    type: Literal["admin_authenticated"] = "admin_authenticated"
    admin_id: str


class GameCreatedMsg(BaseModel):
    type: Literal["game_created"] = "game_created"
    game: GameSummary


class GamesListMsg(BaseModel):
    type: Literal["games_list"] = "games_list"
    games: list[GameSummary]


class GameStateMsg(BaseModel):
    type: Literal["game_state"] = "game_state"
    game: GameSummary
    players: list[PlayerProgress]


class GameStatusMsg(BaseModel):
    type: Literal["game_status"] = "game_status"
    game_id: str
    status: str


class GameDeletedMsg(BaseModel):
    type: Literal["game_deleted"] = "game_deleted"
    game_id: str


class JoinedMsg(BaseModel):
    type: Literal["joined"] = "joined"
    game_id: str
    player_id: str
    player_token: str
    name: str
    board: list[str]
    grid_size: int
    win_condition: WinConditionModel
    status: str


class PlayerStateMsg(BaseModel):
    type: Literal["player_state"] = "player_state"
    game_id: str
    player_id: str
    name: str
    board: list[str]
    names: dict[int, str]
    grid_size: int
    win_condition: WinConditionModel
    status: str
    completed_lines: list[int]
    has_won: bool


class ProgressUpdatedMsg(BaseModel):
    type: Literal["progress_updated"] = "progress_updated"
    index: int
    value: str | None
    names: dict[int, str]
    completed_lines: list[int]
    completed_count: int
    filled_count: int
    has_won: bool


class CellCheckedMsg(BaseModel):
    type: Literal["cell_checked"] = "cell_checked"
    index: int
    value: str
    conflicting_index: int | None


class DuplicateRejectedMsg(BaseModel):
    type: Literal["duplicate_rejected"] = "duplicate_rejected"
    index: int
    value: str
    conflicting_index: int
    message: str


class BoardReplacedMsg(BaseModel):
    type: Literal["board_replaced"] = "board_replaced"
    board: list[str]


class LeftGameMsg(BaseModel):
    type: Literal["left_game"] = "left_game"
    game_id: str


class PlayerWonMsg(BaseModel):
    type: Literal["player_won"] = "player_won"
    game_id: str
    player_id: str
    name: str


class ErrorMsg(BaseModel):
    type: Literal["error"] = "error"
    message: str


def parse_client_message(data: dict) -> ClientMessage | None:
    """Parse a raw dict into a typed client message, or None if invalid."""
    msg_type = data.get("type")
    mapping: dict[str, type[BaseModel]] = {
        "admin_login": AdminLoginMsg,
        "create_game": CreateGameMsg,
        "list_games": ListGamesMsg,
        "watch_game": WatchGameMsg,
        "start_game": StartGameMsg,
        "end_game": EndGameMsg,
        "delete_game": DeleteGameMsg,
        "join_game": JoinGameMsg,
        "set_cell": SetCellMsg,
        "new_board": NewBoardMsg,
        "leave_game": LeaveGameMsg,
        "reconnect": ReconnectMsg,
    }
    model = mapping.get(msg_type)  # type: ignore[arg-type]
    if model is None:
        return None
    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError:
        return None
