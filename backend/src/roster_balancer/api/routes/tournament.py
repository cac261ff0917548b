"""REST endpoints for pairwise ranking tournaments."""

import logging
import threading
import time
import uuid
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from roster_balancer.api.routes.teams import PlayerPayload
from roster_balancer.config import settings
from roster_balancer.models.player import Player
from roster_balancer.models.tournament import Matchup, TournamentSession
from roster_balancer.services.tournament_engine import (
    InvalidWinnerError,
    MatchupNotFoundError,
    TournamentEngine,
    TournamentStateError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tournament", tags=["tournament"])

# In-memory session storage with thread-safe access
_sessions: dict[str, TournamentSession] = {}
_sessions_lock = threading.Lock()
_session_locks: dict[str, threading.Lock] = {}
_cleanup_lock = threading.Lock()
_last_cleanup = 0.0


def _is_session_expired(session: TournamentSession, now: float) -> bool:
    return (now - session.last_access) >= settings.session_ttl_seconds


def _touch_session(session: TournamentSession, now: float) -> None:
    session.last_access = now


def _prune_expired_sessions(now: float | None = None) -> None:
    """Remove expired sessions opportunistically."""
    global _last_cleanup
    now = now or time.time()
    if now - _last_cleanup < settings.session_cleanup_interval_seconds:
        return

    with _cleanup_lock:
        if now - _last_cleanup < settings.session_cleanup_interval_seconds:
            return

        expired: list[str] = []
        with _sessions_lock:
            for session_id, session in _sessions.items():
                lock = _session_locks.get(session_id)
                if lock and lock.locked():
                    continue
                if _is_session_expired(session, now):
                    expired.append(session_id)

            for session_id in expired:
                _sessions.pop(session_id, None)
                _session_locks.pop(session_id, None)

        if expired:
            logger.info(f"Pruned {len(expired)} expired tournament sessions")
        _last_cleanup = now


def _get_session_with_lock(session_id: str) -> tuple[TournamentSession, threading.Lock]:
    """Fetch session and its lock, creating the lock if needed."""
    _prune_expired_sessions()
    with _sessions_lock:
        session = _sessions.get(session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        lock = _session_locks.get(session_id)
        if lock is None:
            lock = threading.Lock()
            _session_locks[session_id] = lock

    return session, lock


def _get_engine(request: Request) -> TournamentEngine:
    """Get or create the engine from app state."""
    if not hasattr(request.app.state, "tournament_engine"):
        request.app.state.tournament_engine = TournamentEngine(
            min_skill=settings.min_skill,
            max_skill=settings.max_skill,
        )
    return request.app.state.tournament_engine


class StartTournamentRequest(BaseModel):
    players: list[PlayerPayload]
    shuffle_seed: Optional[int] = None


class RecordResultRequest(BaseModel):
    winner_id: str
    matchup_id: Optional[str] = None  # Defaults to the current matchup


@router.post("/sessions", status_code=201)
async def start_tournament(request: Request, body: StartTournamentRequest):
    """Create a ranking session and generate its matchups."""
    _prune_expired_sessions()
    engine = _get_engine(request)

    session = TournamentSession(
        session_id=f"rank_{uuid.uuid4().hex[:12]}",
        roster=[p.to_player() for p in body.players],
    )
    engine.start_tournament(session, shuffle_seed=body.shuffle_seed)

    now = time.time()
    _touch_session(session, now)
    with _sessions_lock:
        _sessions[session.session_id] = session
        _session_locks[session.session_id] = threading.Lock()

    return _serialize_session(session)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    """Get current session state."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        now = time.time()
        if _is_session_expired(session, now):
            raise HTTPException(status_code=404, detail="Session expired")
        _touch_session(session, now)

        return _serialize_session(session)


@router.post("/sessions/{session_id}/results")
async def record_result(request: Request, session_id: str, body: RecordResultRequest):
    """Record the winner of the current (or a specific) matchup."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        now = time.time()
        if _is_session_expired(session, now):
            raise HTTPException(status_code=404, detail="Session expired")
        _touch_session(session, now)

        engine = _get_engine(request)
        try:
            engine.record_session_result(session, body.winner_id, body.matchup_id)
        except MatchupNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidWinnerError as e:
            logger.warning(f"Session {session_id}: rejected result: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except TournamentStateError as e:
            raise HTTPException(status_code=409, detail=str(e))

        return _serialize_session(session)


@router.post("/sessions/{session_id}/reset")
async def reset_tournament(request: Request, session_id: str):
    """Discard progress and return the session to setup."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        now = time.time()
        if _is_session_expired(session, now):
            raise HTTPException(status_code=404, detail="Session expired")
        _touch_session(session, now)
        _get_engine(request).reset_tournament(session)
        return _serialize_session(session)


@router.post("/sessions/{session_id}/start")
async def restart_tournament(request: Request, session_id: str, shuffle_seed: Optional[int] = None):
    """Generate a fresh set of matchups for the session's roster."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        now = time.time()
        if _is_session_expired(session, now):
            raise HTTPException(status_code=404, detail="Session expired")
        _touch_session(session, now)
        _get_engine(request).start_tournament(session, shuffle_seed=shuffle_seed)
        return _serialize_session(session)


@router.post("/sessions/{session_id}/apply")
async def apply_rankings(request: Request, session_id: str):
    """Roster with skills rewritten from the final rankings."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        now = time.time()
        if _is_session_expired(session, now):
            raise HTTPException(status_code=404, detail="Session expired")
        _touch_session(session, now)

        try:
            players = _get_engine(request).apply_session_rankings(session)
        except TournamentStateError as e:
            raise HTTPException(status_code=409, detail=str(e))

        return {"players": [_serialize_player(p) for p in players]}


@router.delete("/sessions/{session_id}")
async def end_session(session_id: str):
    """End session early."""
    with _sessions_lock:
        if session_id in _sessions:
            del _sessions[session_id]
            _session_locks.pop(session_id, None)
    return {"status": "ended"}


# Helper functions

def _serialize_session(session: TournamentSession) -> dict:
    """Serialize TournamentSession to dict."""
    current = session.current_matchup
    return {
        "session_id": session.session_id,
        "phase": session.phase.value,
        "players": [
            {
                "key": tp.key,
                "name": tp.name,
                "player_id": tp.original_player.id,
                "wins": tp.wins,
                "comparisons": tp.comparisons,
            }
            for tp in session.players.values()
        ],
        "current_matchup": _serialize_matchup(current) if current else None,
        "total_matchups": session.total_matchups,
        "completed_matchups": session.completed_matchups,
        "progress_percentage": round(session.progress_percentage, 1),
        "rankings": [asdict(r) for r in session.rankings],
    }


def _serialize_matchup(matchup: Matchup) -> dict:
    """Serialize Matchup to dict."""
    return {
        "id": matchup.id,
        "player1_id": matchup.player1_id,
        "player2_id": matchup.player2_id,
        "winner_id": matchup.winner_id,
        "timestamp": matchup.timestamp.isoformat() if matchup.timestamp else None,
    }


def _serialize_player(player: Player) -> dict:
    """Serialize Player to dict."""
    return asdict(player)
