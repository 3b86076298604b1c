import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from bingo.config import settings
from bingo.models import GameSummary
from bingo.session import game_manager
from bingo.ws_handler import router as ws_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    game_manager.load_from_store()
    yield


app = FastAPI(title="Icebreaker Bingo Server", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(ws_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/games/{game_id}", response_model=GameSummary, response_model_by_alias=False)
async def game_info(game_id: str):
    """Public details shown to a player before joining."""
    game = game_manager.get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return game.summary()
