"""Deterministic two-team split of attending players."""

import logging
import math
from typing import Iterable, Optional

from roster_balancer.models.player import Player, Team, Teams, TeamStats

logger = logging.getLogger(__name__)


def _alternate(sorted_players: list[Player]) -> tuple[list[Player], list[Player]]:
    """Deal a skill-ordered list out red, white, red, white, ..."""
    return sorted_players[0::2], sorted_players[1::2]


def generate_teams(players: Iterable[Player], group_code: Optional[str] = None) -> Teams:
    """Split attending players into red and white teams.

    Each position group is sorted by skill (highest first) and dealt out
    alternately, starting with red. The sort is stable, so players with
    equal skill keep their input order and the same input always produces
    the same teams.

    Args:
        players: Any roster; non-attending players are ignored.
        group_code: When given, only players from this roster are used.

    Returns:
        Teams with each attending player placed exactly once.
    """
    attending = [
        p for p in players
        if p.is_attending and (group_code is None or p.group_code == group_code)
    ]

    forwards = sorted((p for p in attending if not p.is_defense), key=lambda p: p.skill, reverse=True)
    defensemen = sorted((p for p in attending if p.is_defense), key=lambda p: p.skill, reverse=True)

    red_forwards, white_forwards = _alternate(forwards)
    red_defense, white_defense = _alternate(defensemen)

    teams = Teams(
        red=Team(forwards=red_forwards, defensemen=red_defense, group_code=group_code),
        white=Team(forwards=white_forwards, defensemen=white_defense, group_code=group_code),
    )
    logger.info(
        f"Generated teams from {len(attending)} attending players: "
        f"red {len(red_forwards)}F/{len(red_defense)}D, "
        f"white {len(white_forwards)}F/{len(white_defense)}D"
    )
    return teams


def calculate_team_stats(team: Team) -> TeamStats:
    """Headcount and mean skill for one team (0 when empty)."""
    members = team.players
    # Half up, so 7.25 reports 7.3
    average = math.floor(sum(p.skill for p in members) * 10 / len(members) + 0.5) / 10 if members else 0
    return TeamStats(
        total_players=len(members),
        average_skill=average,
        forwards_count=len(team.forwards),
        defense_count=len(team.defensemen),
    )
