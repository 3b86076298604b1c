"""Game sessions: admin identity, game lifecycle, players joining and filling squares."""

from __future__ import annotations

import logging
import random
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import WebSocket
from pydantic import BaseModel

from bingo.board import SUPPORTED_GRID_SIZES, BoardGeometry
from bingo.config import settings
from bingo.models import (
    AdminAuthenticatedMsg,
    BoardReplacedMsg,
    CellCheckedMsg,
    DuplicateRejectedMsg,
    ErrorMsg,
    GameCreatedMsg,
    GameDeletedMsg,
    GameDocument,
    GamesListMsg,
    GameStateMsg,
    GameStatusMsg,
    GameSummary,
    JoinedMsg,
    LeftGameMsg,
    PlayerDocument,
    PlayerProgress,
    PlayerStateMsg,
    PlayerWonMsg,
    ProgressUpdatedMsg,
    condition_model,
)
from bingo.progress import DuplicateRejected, ProgressTracker
from bingo.statements import SUPPORTED_LANGUAGES, draw_statements
from bingo.store import GameStore
from bingo.win import WinCondition, validate_condition

logger = logging.getLogger(__name__)

GAME_CODE_LENGTH = 6
GAME_CODE_ALPHABET = string.ascii_uppercase + string.digits


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Player:
    player_id: str
    name: str
    token: str
    board: list[str]
    tracker: ProgressTracker
    joined_at: str = field(default_factory=_now)
    ws: WebSocket | None = field(default=None, repr=False)
    # Whether a win has already been announced for the current board
    has_won: bool = False

    def progress(self) -> PlayerProgress:
        evaluation = self.tracker.evaluate()
        return PlayerProgress(
            player_id=self.player_id,
            name=self.name,
            filled_count=evaluation.filled_count,
            completed_count=evaluation.completed_count,
            has_won=evaluation.has_won,
            names=self.tracker.fill_map,
            joined_at=self.joined_at,
        )


@dataclass
class Game:
    game_id: str
    name: str
    language: str
    admin_id: str
    geometry: BoardGeometry
    condition: WinCondition
    status: str = "pending"  # "pending" | "active" | "ended"
    players: dict[str, Player] = field(default_factory=dict)
    created_at: str = field(default_factory=_now)
    started_at: str | None = None
    ended_at: str | None = None
    # Admin connections watching this game, with their player ordering
    watchers: dict[WebSocket, tuple[str, str]] = field(default_factory=dict, repr=False)

    def validate_join(self, name: str) -> str | None:
        """Return an error message if a player cannot join, or None."""
        if self.status == "ended":
            return "Game has ended"
        if not name.strip():
            return "Please enter your name"
        return None

    def validate_start(self) -> str | None:
        if self.status != "pending":
            return f"Game cannot be started from status '{self.status}'"
        if not self.players:
            return "Cannot start a game with no players"
        return None

    def validate_end(self) -> str | None:
        if self.status == "ended":
            return "Game already ended"
        return None

    def validate_edit(self) -> str | None:
        if self.status == "pending":
            return "Game has not started yet"
        if self.status == "ended":
            return "Game has ended"
        return None

    def start(self):
        self.status = "active"
        self.started_at = _now()

    def end(self):
        self.status = "ended"
        self.ended_at = _now()

    def draw_board(self, rng: random.Random | None = None) -> list[str]:
        return draw_statements(self.language, self.geometry.cell_count, rng)

    def add_player(self, name: str, rng: random.Random | None = None) -> Player:
        player = Player(
            player_id=str(uuid4()),
            name=name.strip(),
            token=str(uuid4()),
            board=self.draw_board(rng),
            tracker=ProgressTracker(self.geometry, self.condition),
        )
        self.players[player.player_id] = player
        return player

    def get_player_by_token(self, token: str) -> Player | None:
        for p in self.players.values():
            if secrets.compare_digest(p.token.encode(), token.encode()):
                return p
        return None

    def summary(self) -> GameSummary:
        return GameSummary(
            game_id=self.game_id,
            name=self.name,
            language=self.language,
            status=self.status,
            grid_size=self.geometry.size,
            win_condition=condition_model(self.condition),
            player_count=len(self.players),
            created_at=self.created_at,
        )

    def to_document(self) -> GameDocument:
        return GameDocument(
            id=self.game_id,
            name=self.name,
            language=self.language,
            admin_id=self.admin_id,
            status=self.status,
            grid_size=self.geometry.size,
            win_condition=condition_model(self.condition),
            players={
                p.player_id: PlayerDocument(
                    id=p.player_id,
                    name=p.name,
                    board=list(p.board),
                    names={str(i): v for i, v in p.tracker.fill_map.items()},
                    joined_at=p.joined_at,
                    token=p.token,
                )
                for p in self.players.values()
            },
            created_at=self.created_at,
            started_at=self.started_at,
            ended_at=self.ended_at,
        )

    @classmethod
    def from_document(cls, doc: GameDocument) -> Game:
        """Rebuild a game from its stored document.

        Raises ValueError if the stored configuration is not playable.
        """
        geometry = BoardGeometry(doc.grid_size)
        condition = doc.win_condition.to_condition()
        validate_condition(condition, geometry)
        game = cls(
            game_id=doc.id,
            name=doc.name,
            language=doc.language,
            admin_id=doc.admin_id or "",
            geometry=geometry,
            condition=condition,
            status=doc.status,
            created_at=doc.created_at or _now(),
            started_at=doc.started_at,
            ended_at=doc.ended_at,
        )
        for pid, pdoc in doc.players.items():
            tracker = ProgressTracker(
                geometry, condition, {int(i): v for i, v in pdoc.names.items()}
            )
            game.players[pid] = Player(
                player_id=pid,
                name=pdoc.name,
                token=pdoc.token or str(uuid4()),
                board=list(pdoc.board),
                tracker=tracker,
                joined_at=pdoc.joined_at or game.created_at,
                has_won=tracker.evaluate().has_won,
            )
        return game


def sort_players(players: list[Player], by: str = "progress", order: str = "desc") -> list[Player]:
    """Order players for the admin view: by filled squares, or by name."""
    reverse = order == "desc"
    if by == "name":
        return sorted(players, key=lambda p: p.name.lower(), reverse=reverse)
    return sorted(players, key=lambda p: len(p.tracker.filled_indices), reverse=reverse)


class GameManager:
    def __init__(self, admins: dict[str, str] | None = None, store: GameStore | None = None):
        self.games: dict[str, Game] = {}
        self.admins: dict[str, str] = admins if admins is not None else {}
        self.store = store or GameStore()
        self._ws_to_admin: dict[WebSocket, str] = {}
        self._ws_to_player: dict[WebSocket, tuple[str, str]] = {}
        self._ws_to_watched: dict[WebSocket, str] = {}
        self.rng = random.Random()

    # -- helpers ------------------------------------------------------------

    def _generate_game_id(self) -> str:
        while True:
            game_id = "".join(secrets.choice(GAME_CODE_ALPHABET) for _ in range(GAME_CODE_LENGTH))
            if game_id not in self.games:
                return game_id

    def get_game(self, game_id: str) -> Game | None:
        return self.games.get(game_id.strip().upper())

    async def _send(self, ws: WebSocket | None, msg: BaseModel):
        if ws is None:
            return
        try:
            await ws.send_json(msg.model_dump())
        except Exception:
            logger.debug("Dropping %s for a closed connection", msg.type, exc_info=True)

    async def _error(self, ws: WebSocket, message: str):
        await self._send(ws, ErrorMsg(message=message))

    def _persist(self, game: Game):
        self.store.save(game.to_document())

    async def _require_admin(self, ws: WebSocket) -> str | None:
        admin_id = self._ws_to_admin.get(ws)
        if admin_id is None:
            await self._error(ws, "Admin access required")
        return admin_id

    async def _owned_game(self, ws: WebSocket, game_id: str) -> Game | None:
        admin_id = await self._require_admin(ws)
        if admin_id is None:
            return None
        game = self.get_game(game_id)
        if game is None or game.admin_id != admin_id:
            await self._error(ws, "Game not found")
            return None
        return game

    async def _player_for_ws(self, ws: WebSocket) -> tuple[Game, Player] | None:
        ids = self._ws_to_player.get(ws)
        game = self.games.get(ids[0]) if ids else None
        player = game.players.get(ids[1]) if game else None
        if player is None:
            await self._error(ws, "Not in a game")
            return None
        return game, player

    def _game_state(self, game: Game, sort_by: str = "progress", sort_order: str = "desc") -> GameStateMsg:
        ordered = sort_players(list(game.players.values()), sort_by, sort_order)
        return GameStateMsg(game=game.summary(), players=[p.progress() for p in ordered])

    async def _broadcast_state(self, game: Game):
        for ws, (sort_by, sort_order) in list(game.watchers.items()):
            await self._send(ws, self._game_state(game, sort_by, sort_order))

    async def _notify_players(self, game: Game, msg: BaseModel):
        for p in game.players.values():
            await self._send(p.ws, msg)

    def load_from_store(self):
        for doc in self.store.load():
            try:
                self.games[doc.id] = Game.from_document(doc)
            except ValueError as exc:
                logger.warning("Skipping stored game %s: %s", doc.id, exc)

    # -- admin --------------------------------------------------------------

    async def admin_login(self, ws: WebSocket, email: str, password: str) -> str | None:
        expected = self.admins.get(email)
        if expected is None or not secrets.compare_digest(expected.encode(), password.encode()):
            logger.warning("Failed admin login for %s", email)
            await self._error(ws, "Invalid credentials")
            return None
        self._ws_to_admin[ws] = email
        logger.info("Admin %s logged in", email)
        await self._send(ws, AdminAuthenticatedMsg(admin_id=email))
        return email

    async def create_game(
        self,
        ws: WebSocket,
        name: str,
        language: str,
        grid_size: int,
        condition: WinCondition,
    ) -> Game | None:
        admin_id = await self._require_admin(ws)
        if admin_id is None:
            return None
        if not name.strip():
            await self._error(ws, "Game name is required")
            return None
        if language not in SUPPORTED_LANGUAGES:
            await self._error(ws, f"Unsupported language: {language}")
            return None
        if grid_size not in SUPPORTED_GRID_SIZES:
            await self._error(ws, f"Grid size must be one of {SUPPORTED_GRID_SIZES}")
            return None
        geometry = BoardGeometry(grid_size)
        try:
            validate_condition(condition, geometry)
        except ValueError as exc:
            await self._error(ws, str(exc))
            return None

        game = Game(
            game_id=self._generate_game_id(),
            name=name.strip(),
            language=language,
            admin_id=admin_id,
            geometry=geometry,
            condition=condition,
        )
        self.games[game.game_id] = game
        self._persist(game)
        logger.info("Game %s created: %dx%d, %s", game.game_id, grid_size, grid_size, condition)

        await self._send(ws, GameCreatedMsg(game=game.summary()))
        return game

    async def list_games(self, ws: WebSocket) -> list[Game] | None:
        admin_id = await self._require_admin(ws)
        if admin_id is None:
            return None
        games = [g for g in self.games.values() if g.admin_id == admin_id]
        games.sort(key=lambda g: g.created_at, reverse=True)
        await self._send(ws, GamesListMsg(games=[g.summary() for g in games]))
        return games

    async def watch_game(self, ws: WebSocket, game_id: str, sort_by: str = "progress", sort_order: str = "desc"):
        game = await self._owned_game(ws, game_id)
        if game is None:
            return
        previous = self._ws_to_watched.get(ws)
        if previous is not None and previous in self.games:
            self.games[previous].watchers.pop(ws, None)
        game.watchers[ws] = (sort_by, sort_order)
        self._ws_to_watched[ws] = game.game_id
        await self._send(ws, self._game_state(game, sort_by, sort_order))

    async def start_game(self, ws: WebSocket, game_id: str):
        game = await self._owned_game(ws, game_id)
        if game is None:
            return
        error = game.validate_start()
        if error:
            await self._error(ws, error)
            return
        game.start()
        self._persist(game)
        logger.info("Game %s started with %d players", game.game_id, len(game.players))

        status = GameStatusMsg(game_id=game.game_id, status=game.status)
        await self._notify_players(game, status)
        if ws not in game.watchers:
            await self._send(ws, status)
        await self._broadcast_state(game)

    async def end_game(self, ws: WebSocket, game_id: str):
        game = await self._owned_game(ws, game_id)
        if game is None:
            return
        error = game.validate_end()
        if error:
            await self._error(ws, error)
            return
        game.end()
        self._persist(game)
        logger.info("Game %s ended", game.game_id)

        status = GameStatusMsg(game_id=game.game_id, status=game.status)
        await self._notify_players(game, status)
        if ws not in game.watchers:
            await self._send(ws, status)
        await self._broadcast_state(game)

    async def delete_game(self, ws: WebSocket, game_id: str):
        game = await self._owned_game(ws, game_id)
        if game is None:
            return
        self.games.pop(game.game_id, None)
        self.store.delete(game.game_id)
        logger.info("Game %s deleted with %d players", game.game_id, len(game.players))

        deleted = GameDeletedMsg(game_id=game.game_id)
        for p in game.players.values():
            if p.ws is not None:
                self._ws_to_player.pop(p.ws, None)
                await self._send(p.ws, deleted)
        for watcher in list(game.watchers):
            self._ws_to_watched.pop(watcher, None)
            await self._send(watcher, deleted)
        if ws not in game.watchers:
            await self._send(ws, deleted)
        game.watchers.clear()

    # -- players ------------------------------------------------------------

    async def join_game(self, ws: WebSocket, game_id: str, name: str) -> Player | None:
        if ws in self._ws_to_admin:
            await self._error(ws, "Admins cannot join as players")
            return None
        if ws in self._ws_to_player:
            await self._error(ws, "Already in a game")
            return None
        game = self.get_game(game_id)
        if game is None:
            await self._error(ws, "Game not found")
            return None
        error = game.validate_join(name)
        if error:
            await self._error(ws, error)
            return None

        player = game.add_player(name, self.rng)
        player.ws = ws
        self._ws_to_player[ws] = (game.game_id, player.player_id)
        self._persist(game)
        logger.info("Player %s joined game %s", player.name, game.game_id)

        await self._send(
            ws,
            JoinedMsg(
                game_id=game.game_id,
                player_id=player.player_id,
                player_token=player.token,
                name=player.name,
                board=player.board,
                grid_size=game.geometry.size,
                win_condition=condition_model(game.condition),
                status=game.status,
            ),
        )
        await self._broadcast_state(game)
        return player

    async def set_cell(self, ws: WebSocket, index: int, value: str, commit: bool = True):
        found = await self._player_for_ws(ws)
        if found is None:
            return
        game, player = found

        error = game.validate_edit()
        if error is None and not game.geometry.contains(index):
            error = "Square is not on the board"
        if error:
            await self._error(ws, error)
            return

        if not commit:
            conflict = player.tracker.check(index, value)
            await self._send(
                ws, CellCheckedMsg(index=index, value=value.strip(), conflicting_index=conflict)
            )
            return

        try:
            evaluation = player.tracker.set_cell(index, value)
        except DuplicateRejected as exc:
            logger.debug("Player %s: duplicate %r rejected at %d", player.player_id, exc.value, index)
            await self._send(
                ws,
                DuplicateRejectedMsg(
                    index=exc.index,
                    value=exc.value,
                    conflicting_index=exc.conflicting_index,
                    message=str(exc),
                ),
            )
            return

        self._persist(game)
        names = player.tracker.fill_map
        await self._send(
            ws,
            ProgressUpdatedMsg(
                index=index,
                value=names.get(index),
                names=names,
                completed_lines=list(evaluation.completed_lines),
                completed_count=evaluation.completed_count,
                filled_count=evaluation.filled_count,
                has_won=evaluation.has_won,
            ),
        )

        if evaluation.has_won and not player.has_won:
            logger.info("Player %s has bingo in game %s", player.name, game.game_id)
            won = PlayerWonMsg(game_id=game.game_id, player_id=player.player_id, name=player.name)
            for watcher in list(game.watchers):
                await self._send(watcher, won)
        player.has_won = evaluation.has_won
        await self._broadcast_state(game)

    async def new_board(self, ws: WebSocket):
        found = await self._player_for_ws(ws)
        if found is None:
            return
        game, player = found
        if game.status == "ended":
            await self._error(ws, "Game has ended")
            return

        player.board = game.draw_board(self.rng)
        player.tracker.clear_all()
        player.has_won = False
        self._persist(game)

        await self._send(ws, BoardReplacedMsg(board=player.board))
        await self._broadcast_state(game)

    async def leave_game(self, ws: WebSocket):
        found = await self._player_for_ws(ws)
        if found is None:
            return
        game, player = found
        game.players.pop(player.player_id, None)
        self._ws_to_player.pop(ws, None)
        self._persist(game)
        logger.info("Player %s left game %s", player.name, game.game_id)

        await self._send(ws, LeftGameMsg(game_id=game.game_id))
        await self._broadcast_state(game)

    async def reconnect(self, ws: WebSocket, game_id: str, player_token: str):
        if ws in self._ws_to_admin:
            await self._error(ws, "Admins cannot join as players")
            return
        game = self.get_game(game_id)
        if game is None:
            await self._error(ws, "Game not found")
            return

        player = game.get_player_by_token(player_token)
        if player is None:
            await self._error(ws, "Invalid player token")
            return

        # A socket plays one player at a time
        if self._ws_to_player.get(ws) != (game.game_id, player.player_id):
            self._detach_player(ws)
        # The newest session takes over; an older one stops receiving updates
        if player.ws is not None and player.ws is not ws:
            self._ws_to_player.pop(player.ws, None)
        player.ws = ws
        self._ws_to_player[ws] = (game.game_id, player.player_id)

        evaluation = player.tracker.evaluate()
        await self._send(
            ws,
            PlayerStateMsg(
                game_id=game.game_id,
                player_id=player.player_id,
                name=player.name,
                board=player.board,
                names=player.tracker.fill_map,
                grid_size=game.geometry.size,
                win_condition=condition_model(game.condition),
                status=game.status,
                completed_lines=list(evaluation.completed_lines),
                has_won=evaluation.has_won,
            ),
        )

    async def handle_disconnect(self, ws: WebSocket):
        self._ws_to_admin.pop(ws, None)

        watched = self._ws_to_watched.pop(ws, None)
        if watched is not None and watched in self.games:
            self.games[watched].watchers.pop(ws, None)

        self._detach_player(ws)

    def _detach_player(self, ws: WebSocket):
        """Unbind a socket from its player; the player stays in the game."""
        ids = self._ws_to_player.pop(ws, None)
        if ids is None:
            return
        game = self.games.get(ids[0])
        player = game.players.get(ids[1]) if game else None
        if player is not None and player.ws is ws:
            player.ws = None


game_manager = GameManager(admins=settings.admin_accounts, store=GameStore(settings.data_dir))
