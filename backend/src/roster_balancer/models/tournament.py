"""Models for pairwise ranking tournaments."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from roster_balancer.models.player import Player


class TournamentPhase(str, Enum):
    """Lifecycle of a ranking session."""

    SETUP = "setup"  # No matchups yet
    COMPARING = "comparing"  # Waiting for pairwise results
    RESULTS = "results"  # All matchups resolved, rankings available


@dataclass
class TournamentPlayer:
    """A roster player taking part in a ranking tournament."""

    key: str  # Tournament-local, distinct from the persistence id
    name: str
    original_player: Player
    wins: int = 0
    comparisons: int = 0


@dataclass
class Matchup:
    """One head-to-head comparison between two tournament players."""

    id: str
    player1_id: str
    player2_id: str
    winner_id: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def is_resolved(self) -> bool:
        return self.winner_id is not None

    def involves(self, key: str) -> bool:
        return key in (self.player1_id, self.player2_id)


@dataclass
class PlayerRanking:
    """Final standing of a tournament player."""

    player_id: str  # Tournament key
    rank: int  # 1 = best
    score: float  # Win rate 0.0 - 1.0
    wins: int = 0
    confidence: float = 0.0  # 0.0 - 1.0, grows with comparisons played


@dataclass
class TournamentSession:
    """Caller-owned state for one ranking session."""

    session_id: str
    roster: list[Player] = field(default_factory=list)
    phase: TournamentPhase = TournamentPhase.SETUP
    players: dict[str, TournamentPlayer] = field(default_factory=dict)
    matchups: list[Matchup] = field(default_factory=list)
    rankings: list[PlayerRanking] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)

    @property
    def current_matchup(self) -> Optional[Matchup]:
        """First unresolved matchup in generation order."""
        return next((m for m in self.matchups if not m.is_resolved), None)

    @property
    def total_matchups(self) -> int:
        return len(self.matchups)

    @property
    def completed_matchups(self) -> int:
        return sum(1 for m in self.matchups if m.is_resolved)

    @property
    def progress_percentage(self) -> float:
        if not self.matchups:
            return 0.0
        return self.completed_matchups / self.total_matchups * 100
