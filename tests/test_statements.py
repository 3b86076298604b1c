"""Tests for drawing board statements from the language pools."""

import random

import pytest

from bingo.statements import STATEMENTS, SUPPORTED_LANGUAGES, draw_statements


class TestDrawStatements:
    @pytest.mark.parametrize("language", SUPPORTED_LANGUAGES)
    @pytest.mark.parametrize("count", [9, 16, 25])
    def test_distinct_statements_from_pool(self, language, count):
        drawn = draw_statements(language, count)
        assert len(drawn) == count
        assert len(set(drawn)) == count
        assert set(drawn) <= set(STATEMENTS[language])

    def test_seeded_rng_is_reproducible(self):
        assert draw_statements("en", 9, random.Random(1)) == draw_statements("en", 9, random.Random(1))

    def test_unknown_language(self):
        with pytest.raises(ValueError):
            draw_statements("de", 9)

    def test_too_many_requested(self):
        with pytest.raises(ValueError):
            draw_statements("en", len(STATEMENTS["en"]) + 1)

    def test_pools_have_no_duplicates(self):
        for pool in STATEMENTS.values():
            assert len(pool) == len(set(pool))
