"""Prompt statements printed on bingo squares, per language."""

from __future__ import annotations

import random

STATEMENTS: dict[str, list[str]] = {
    "en": [
        "Has traveled to 5+ countries",
        "Speaks 3+ languages",
        "Has run a marathon",
        "Is a morning person",
        "Has met a celebrity",
        "Plays a musical instrument",
        "Has been skydiving",
        "Is left-handed",
        "Has a pet other than cat/dog",
        "Was born in the same month as you",
        "Has worked in 3+ countries",
        "Enjoys cooking",
        "Has been on TV",
        "Can do a handstand",
        "Has lived in 5+ cities",
        "Loves spicy food",
        "Has a hidden talent",
        "Enjoys hiking",
        "Has never broken a bone",
        "Is an only child",
        "Has written a book or blog",
        "Loves winter sports",
        "Can solve a Rubik's cube",
        "Has volunteered abroad",
        "Enjoys reading sci-fi",
        "Has the same hobby as you",
        "Is afraid of heights",
        "Drinks coffee every day",
        "Has been to Antarctica",
        "Loves karaoke",
        "Has the same favorite color",
        "Enjoys gardening",
        "Has run their own business",
        "Loves sushi",
        "Has attended a music festival",
        "Can speak backwards",
        "Has gone camping this year",
        "Prefers tea over coffee",
        "Has a collection hobby",
        "Loves board games",
    ],
    "no": [
        "Har reist til 5+ land",
        "Snakker 3+ språk",
        "Har løpt maraton",
        "Er morgenmenneske",
        "Har møtt en kjendis",
        "Spiller et musikkinstrument",
        "Har prøvd fallskjermhopping",
        "Er venstrehendt",
        "Har et kjæledyr utenom katt/hund",
        "Er født i samme måned som deg",
        "Har jobbet i 3+ land",
        "Liker å lage mat",
        "Har vært på TV",
        "Kan stå på hendene",
        "Har bodd i 5+ byer",
        "Elsker sterk mat",
        "Har et skjult talent",
        "Liker fjelltur",
        "Har aldri brukket et bein",
        "Er enebarn",
        "Har skrevet bok eller blogg",
        "Elsker vintersport",
        "Kan løse Rubiks kube",
        "Har vært frivillig i utlandet",
        "Liker å lese sci-fi",
        "Har samme hobby som deg",
        "Er redd for høyder",
        "Drikker kaffe hver dag",
        "Har vært på Antarktis",
        "Elsker karaoke",
        "Har samme favorittfarge",
        "Liker hagearbeid",
        "Har drevet egen bedrift",
        "Elsker sushi",
        "Har vært på musikkfestival",
        "Kan snakke baklengs",
        "Har vært på camping i år",
        "Foretrekker te fremfor kaffe",
        "Har en samlerinteresse",
        "Elsker brettspill",
    ],
}

SUPPORTED_LANGUAGES = tuple(STATEMENTS)


def draw_statements(language: str, count: int, rng: random.Random | None = None) -> list[str]:
    """Pick `count` distinct statements from the language's pool."""
    pool = STATEMENTS.get(language)
    if pool is None:
        raise ValueError(f"Unsupported language: {language}")
    if count > len(pool):
        raise ValueError(f"Only {len(pool)} statements available for '{language}', {count} requested")
    return (rng or random).sample(pool, count)
