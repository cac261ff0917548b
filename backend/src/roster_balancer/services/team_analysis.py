"""Diagnostics for the team generator.

Used by the analysis endpoint to sanity-check team composition against a
fixed sample roster. Because generation is deterministic, repeated runs
over the same roster should report exactly one composition.
"""

from typing import Optional

from roster_balancer.models.player import Player, Teams
from roster_balancer.services.team_generator import generate_teams

SAMPLE_GROUP_CODE = "sample"


def _sample(pid: int, first: str, last: str, skill: int, is_defense: bool) -> Player:
    return Player(
        id=pid,
        first_name=first,
        last_name=last,
        skill=skill,
        is_defense=is_defense,
        is_attending=True,
        group_code=SAMPLE_GROUP_CODE,
    )


# 12 forwards, 10 defensemen
SAMPLE_ROSTER: list[Player] = [
    _sample(1, "Alex", "Ovechkin", 10, False),
    _sample(2, "Sidney", "Crosby", 10, False),
    _sample(3, "Connor", "McDavid", 10, False),
    _sample(4, "Nathan", "MacKinnon", 9, False),
    _sample(5, "Auston", "Matthews", 9, False),
    _sample(6, "Leon", "Draisaitl", 9, False),
    _sample(7, "Brad", "Marchand", 8, False),
    _sample(8, "David", "Pastrnak", 8, False),
    _sample(9, "Mitch", "Marner", 7, False),
    _sample(10, "John", "Tavares", 7, False),
    _sample(11, "Bo", "Horvat", 6, False),
    _sample(12, "J.T.", "Miller", 6, False),
    _sample(13, "Cale", "Makar", 10, True),
    _sample(14, "Roman", "Josi", 9, True),
    _sample(15, "Victor", "Hedman", 9, True),
    _sample(16, "Adam", "Fox", 8, True),
    _sample(17, "Charlie", "McAvoy", 8, True),
    _sample(18, "Miro", "Heiskanen", 7, True),
    _sample(19, "Quinn", "Hughes", 7, True),
    _sample(20, "Dougie", "Hamilton", 6, True),
    _sample(21, "Shea", "Theodore", 6, True),
    _sample(22, "Aaron", "Ekblad", 5, True),
]


def _mean_skill(players: list[Player]) -> float:
    if not players:
        return 0
    return sum(p.skill for p in players) / len(players)


def analyze_teams(teams: Teams) -> dict:
    """Per-team counts and average skill, overall and by position."""
    stats = {}
    for name, team in (("red", teams.red), ("white", teams.white)):
        stats[name] = {
            "count": len(team),
            "forwards": len(team.forwards),
            "defensemen": len(team.defensemen),
            "avg_skill": _mean_skill(team.players),
            "avg_forward_skill": _mean_skill(team.forwards),
            "avg_defense_skill": _mean_skill(team.defensemen),
        }
    return stats


def _composition(stats: dict) -> str:
    red, white = stats["red"], stats["white"]
    return (
        f"Red: {red['forwards']}F/{red['defensemen']}D | "
        f"White: {white['forwards']}F/{white['defensemen']}D"
    )


def run_bulk_analysis(
    players: list[Player],
    iterations: int,
    group_code: Optional[str] = None,
) -> dict:
    """Generate teams repeatedly and summarize the outcomes.

    Args:
        players: Roster to split.
        iterations: Number of generation runs for the composition survey.
        group_code: Optional roster filter passed through to the generator.

    Returns:
        Dict with ``bulk_analysis`` (distinct compositions seen) and
        ``single_run_analysis`` (top players and per-team stats of one run).
    """
    compositions: list[str] = []
    for _ in range(iterations):
        composition = _composition(analyze_teams(generate_teams(players, group_code)))
        if composition not in compositions:
            compositions.append(composition)

    teams = generate_teams(players, group_code)
    candidates = [
        p for p in players
        if p.is_attending and (group_code is None or p.group_code == group_code)
    ]
    top_players = sorted(candidates, key=lambda p: p.skill, reverse=True)[:4]

    return {
        "bulk_analysis": {
            "iterations": iterations,
            "unique_compositions": compositions,
        },
        "single_run_analysis": {
            "top_skilled_players": [f"{p.first_name} ({p.skill})" for p in top_players],
            "team_stats": analyze_teams(teams),
            "red_team_players": ", ".join(p.first_name for p in teams.red.players),
        },
    }
