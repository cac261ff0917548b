"""Data models for the roster balancer."""

from roster_balancer.models.player import Player, Team, Teams, TeamStats
from roster_balancer.models.tournament import (
    Matchup,
    PlayerRanking,
    TournamentPhase,
    TournamentPlayer,
    TournamentSession,
)

__all__ = [
    "Player",
    "Team",
    "Teams",
    "TeamStats",
    "Matchup",
    "PlayerRanking",
    "TournamentPhase",
    "TournamentPlayer",
    "TournamentSession",
]
