"""Business logic services."""

from roster_balancer.services.team_generator import calculate_team_stats, generate_teams
from roster_balancer.services.tournament_engine import (
    InvalidWinnerError,
    MatchupNotFoundError,
    TournamentEngine,
    TournamentIncompleteError,
    TournamentStateError,
)

__all__ = [
    "calculate_team_stats",
    "generate_teams",
    "InvalidWinnerError",
    "MatchupNotFoundError",
    "TournamentEngine",
    "TournamentIncompleteError",
    "TournamentStateError",
]
