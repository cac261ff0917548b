"""REST endpoints for team generation."""

from dataclasses import asdict
from typing import Optional, Union

from fastapi import APIRouter, Query
from pydantic import BaseModel

from roster_balancer.models.player import Player, Teams
from roster_balancer.services.team_analysis import SAMPLE_ROSTER, run_bulk_analysis
from roster_balancer.services.team_generator import calculate_team_stats, generate_teams

router = APIRouter(prefix="/api/teams", tags=["teams"])


class PlayerPayload(BaseModel):
    """Player record as sent by the client."""

    id: Optional[Union[int, str]] = None
    first_name: str
    last_name: str = ""
    skill: int
    is_defense: bool = False
    is_attending: bool = True
    group_code: Optional[str] = None

    def to_player(self) -> Player:
        return Player(**self.model_dump())


class GenerateTeamsRequest(BaseModel):
    players: list[PlayerPayload]
    group_code: Optional[str] = None


class TeamPayload(BaseModel):
    forwards: list[PlayerPayload] = []
    defensemen: list[PlayerPayload] = []
    group_code: Optional[str] = None


class TeamsPayload(BaseModel):
    red: TeamPayload = TeamPayload()
    white: TeamPayload = TeamPayload()


@router.post("/generate")
async def create_teams(body: GenerateTeamsRequest):
    """Split the attending players into red and white teams."""
    teams = generate_teams([p.to_player() for p in body.players], body.group_code)
    return {
        "teams": teams.to_dict(),
        "stats": _serialize_stats(teams),
    }


@router.post("/stats")
async def team_stats(body: TeamsPayload):
    """Stats for a previously generated (possibly hand-edited) pair of teams."""
    teams = Teams.from_dict(body.model_dump())
    return {"stats": _serialize_stats(teams)}


@router.get("/analysis")
async def analyze_generator(iterations: int = Query(default=100, ge=1, le=1000)):
    """Run the generator repeatedly over the bundled sample roster."""
    return run_bulk_analysis(SAMPLE_ROSTER, iterations)


def _serialize_stats(teams: Teams) -> dict:
    """Serialize both teams' stats to dict."""
    return {
        "red": asdict(calculate_team_stats(teams.red)),
        "white": asdict(calculate_team_stats(teams.white)),
    }
