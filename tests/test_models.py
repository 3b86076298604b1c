"""Tests for protocol parsing and stored document defaults."""

from bingo.models import (
    BlackoutWinCondition,
    CreateGameMsg,
    GameDocument,
    LinesWinCondition,
    SetCellMsg,
    parse_client_message,
)
from bingo.win import Blackout, Lines


class TestParseClientMessage:
    def test_create_game_defaults(self):
        msg = parse_client_message({"type": "create_game", "name": "Kickoff"})
        assert isinstance(msg, CreateGameMsg)
        assert msg.grid_size == 5
        assert msg.win_condition.to_condition() == Lines(1)

    def test_create_game_blackout(self):
        msg = parse_client_message(
            {"type": "create_game", "name": "Party", "grid_size": 3, "win_condition": {"type": "blackout"}}
        )
        assert isinstance(msg.win_condition, BlackoutWinCondition)
        assert msg.win_condition.to_condition() == Blackout()

    def test_lines_accepts_both_spellings(self):
        for key in ("lines_required", "linesRequired"):
            msg = parse_client_message(
                {"type": "create_game", "name": "x", "win_condition": {"type": "lines", key: 3}}
            )
            assert msg.win_condition.to_condition() == Lines(3)

    def test_zero_lines_is_invalid(self):
        data = {"type": "create_game", "name": "x", "win_condition": {"type": "lines", "lines_required": 0}}
        assert parse_client_message(data) is None

    def test_set_cell_commit_default(self):
        msg = parse_client_message({"type": "set_cell", "index": 4, "value": "Ann"})
        assert isinstance(msg, SetCellMsg)
        assert msg.commit is True

    def test_unknown_type(self):
        assert parse_client_message({"type": "draw_card"}) is None

    def test_missing_fields(self):
        assert parse_client_message({"type": "join_game"}) is None


class TestGameDocument:
    def test_legacy_document_defaults(self):
        doc = GameDocument.model_validate({"id": "ABC123", "name": "Old game", "language": "no"})
        assert doc.grid_size == 5
        assert isinstance(doc.win_condition, LinesWinCondition)
        assert doc.win_condition.lines_required == 1
        assert doc.status == "active"
        assert doc.players == {}

    def test_camel_case_round_trip(self):
        raw = {
            "id": "XYZ789",
            "name": "Offsite",
            "language": "en",
            "adminId": "host@example.com",
            "status": "pending",
            "gridSize": 4,
            "winCondition": {"type": "lines", "linesRequired": 2},
            "players": {
                "p1": {"id": "p1", "name": "Ann", "board": ["a"] * 16, "names": {"0": "Bo"}, "joinedAt": "t"}
            },
        }
        doc = GameDocument.model_validate(raw)
        dumped = doc.model_dump(by_alias=True)
        assert dumped["gridSize"] == 4
        assert dumped["winCondition"] == {"type": "lines", "linesRequired": 2}
        assert dumped["players"]["p1"]["names"] == {"0": "Bo"}
        assert dumped["adminId"] == "host@example.com"
