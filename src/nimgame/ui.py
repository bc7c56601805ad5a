"""FastAPI-powered web UI for playing Nim against the minimax AI."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import MinimaxAI
from .game import INITIAL_PILE, MAX_TAKE, InvalidMove, NimGame

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active Nim game and its AI opponent."""

    game: NimGame
    ai: MinimaxAI
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    # Bumped on reset so a deferred AI turn from an older game is dropped
    generation: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Nim", description="Nim against a minimax AI, in the browser")


AI_THINK_DELAY = 0.9  # seconds


class MoveRequest(BaseModel):
    """Request payload for taking objects from the pile."""

    amount: int = Field(ge=1, le=MAX_TAKE, description="Objects to remove")


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(game=NimGame(), ai=MinimaxAI())
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _record(session: GameSession, player: str, amount: int) -> None:
    session.move_log.append(
        {"player": player, "amount": amount, "pileAfter": session.game.pile}
    )


def _run_ai_turn(game_id: str, generation: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        if session.generation != generation:
            logger.debug("Dropping stale AI turn for game %s", game_id)
            return
        try:
            game = session.game
            if game.is_over or game.current_player != session.ai.player:
                return
            amount = session.ai.choose(game)
            game.apply_ai_move(amount)
            _record(session, session.ai.player, amount)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        status = game.status()
        state: Dict[str, object] = {
            "id": game_id,
            "pile": status.pile,
            "initialPile": INITIAL_PILE,
            "currentPlayer": status.turn,
            "winner": status.winner,
            "status": status.message,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    amount: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        try:
            outcome = session.game.apply_player_move(amount)
        except InvalidMove as exc:
            logger.info("Rejected move of %d in game %s: %s", amount, game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        _record(session, outcome.side, amount)

        if outcome.ai_should_move:
            session.ai_pending = True
        generation = session.generation

    if outcome.ai_should_move and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id, generation)


def _reset_session(game_id: str, session: GameSession) -> None:
    with session.lock:
        session.game.reset()
        session.move_log.clear()
        session.ai_pending = False
        session.generation += 1
    logger.info("Reset game %s", game_id)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.amount, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    _reset_session(game_id, session)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Nim</title>
    <link rel=\"preconnect\" href=\"https://fonts.googleapis.com\" />
    <link rel=\"preconnect\" href=\"https://fonts.gstatic.com\" crossorigin />
    <link
      href=\"https://fonts.googleapis.com/css2?family=Poppins:wght@400;500;600;700&display=swap\"
      rel=\"stylesheet\"
    />
    <style>
      :root {
        color-scheme: light;
        font-family: 'Poppins', system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
        font-weight: 400;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
        width: min(560px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 0.5rem;
        font-size: clamp(1.8rem, 2.4vw + 1.2rem, 2.6rem);
        letter-spacing: 0.06em;
        color: #0c1a33;
      }
      .tagline {
        margin: 0 0 1.75rem;
        color: rgba(19, 32, 58, 0.75);
        font-weight: 500;
      }
      #pile {
        font-size: 2rem;
        font-weight: 600;
        margin-bottom: 0.5rem;
      }
      .stones {
        display: flex;
        flex-wrap: wrap;
        justify-content: center;
        gap: 0.4rem;
        min-height: 1.4rem;
        margin-bottom: 1rem;
      }
      .stone {
        width: 1.2rem;
        height: 1.2rem;
        border-radius: 50%;
        background: linear-gradient(135deg, #4c6ef5, #364fc7);
      }
      #status {
        font-weight: 500;
        margin-bottom: 1.25rem;
      }
      #status.ai-turn {
        color: #c2255c;
      }
      .moves {
        display: flex;
        justify-content: center;
        gap: 0.75rem;
        margin-bottom: 1rem;
      }
      button {
        font: inherit;
        border: none;
        border-radius: 999px;
        padding: 0.6rem 1.3rem;
        background: #364fc7;
        color: white;
        cursor: pointer;
      }
      button:disabled {
        opacity: 0.45;
        cursor: not-allowed;
      }
      button.secondary {
        background: #e9ecf8;
        color: #13203a;
      }
      #message {
        min-height: 1.4rem;
        color: #c92a2a;
      }
      #move-log {
        list-style: none;
        padding: 0;
        margin: 1rem 0 0;
        font-size: 0.9rem;
        color: rgba(19, 32, 58, 0.75);
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Nim</h1>
      <p class=\"tagline\">Take 1 to 3 objects. Whoever empties the pile wins.</p>
      <div id=\"pile\">Pile: 15</div>
      <div id=\"stones\" class=\"stones\"></div>
      <div id=\"status\">Your turn!</div>
      <div class=\"moves\">
        <button data-amount=\"1\">Take 1</button>
        <button data-amount=\"2\">Take 2</button>
        <button data-amount=\"3\">Take 3</button>
      </div>
      <button id=\"reset\" class=\"secondary\">Reset</button>
      <div id=\"message\"></div>
      <ul id=\"move-log\"></ul>
    </main>
    <script>
      const pileEl = document.getElementById('pile');
      const stonesEl = document.getElementById('stones');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const logEl = document.getElementById('move-log');
      const resetButton = document.getElementById('reset');
      const moveButtons = Array.from(document.querySelectorAll('[data-amount]'));

      let gameId = null;
      let gameState = null;
      let aiPollHandle = null;
      let isRequestPending = false;

      function stopAiPolling() {
        if (aiPollHandle !== null) {
          clearTimeout(aiPollHandle);
          aiPollHandle = null;
        }
      }

      function ensureAiPolling() {
        if (aiPollHandle !== null) return;
        aiPollHandle = window.setTimeout(pollAiState, 450);
      }

      function render() {
        if (!gameState) return;
        pileEl.textContent = `Pile: ${gameState.pile}`;
        stonesEl.replaceChildren(
          ...Array.from({ length: gameState.pile }, () => {
            const stone = document.createElement('span');
            stone.className = 'stone';
            return stone;
          })
        );
        statusEl.textContent = gameState.status;
        statusEl.classList.toggle('ai-turn', gameState.aiPending);
        const allowed = new Set(gameState.availableMoves);
        moveButtons.forEach((button) => {
          const amount = Number.parseInt(button.dataset.amount, 10);
          button.disabled =
            isRequestPending ||
            gameState.aiPending ||
            gameState.currentPlayer !== 'Player' ||
            !allowed.has(amount);
        });
        logEl.replaceChildren(
          ...gameState.moveLog.map((entry) => {
            const item = document.createElement('li');
            const who = entry.player === 'Player' ? 'You' : 'AI';
            item.textContent = `${who} took ${entry.amount} (pile ${entry.pileAfter})`;
            return item;
          })
        );
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        render();
        if (gameState.aiPending && !gameState.winner) {
          ensureAiPolling();
        } else {
          stopAiPolling();
        }
      }

      async function request(url, options = {}) {
        const response = await fetch(url, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          const detail = typeof payload?.detail === 'string' ? payload.detail : 'Invalid move';
          throw new Error(detail);
        }
        return response.json();
      }

      async function startGame() {
        try {
          setState(await request('/api/game', { method: 'POST' }));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        }
      }

      async function pollAiState() {
        aiPollHandle = null;
        if (!gameId) return;
        try {
          setState(await request(`/api/game/${gameId}`));
        } catch (error) {
          console.error('Polling failed', error);
          ensureAiPolling();
        }
      }

      async function sendMove(amount) {
        if (!gameId || isRequestPending || !gameState || gameState.winner) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          setState(
            await request(`/api/game/${gameId}/move`, {
              method: 'POST',
              body: JSON.stringify({ amount }),
            })
          );
        } catch (error) {
          messageEl.textContent = error.message;
        } finally {
          isRequestPending = false;
          render();
        }
      }

      async function resetGame() {
        if (!gameId) {
          await startGame();
          return;
        }
        stopAiPolling();
        messageEl.textContent = '';
        try {
          setState(await request(`/api/game/${gameId}/reset`, { method: 'POST' }));
        } catch (error) {
          messageEl.textContent = error.message;
        }
      }

      moveButtons.forEach((button) => {
        button.addEventListener('click', () => {
          sendMove(Number.parseInt(button.dataset.amount, 10));
        });
      });
      resetButton.addEventListener('click', resetGame);

      startGame();
    </script>
  </body>
</html>
"""
