"""Player and team models."""

from dataclasses import asdict, dataclass, field
from typing import Optional, Union

PlayerId = Union[int, str]


@dataclass
class Player:
    """A rostered player as supplied by the persistence layer."""

    id: Optional[PlayerId]
    first_name: str
    last_name: str
    skill: int  # nominally 1-10, not enforced
    is_defense: bool = False
    is_attending: bool = True
    group_code: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Build a Player from a stored record, ignoring unknown columns."""
        return cls(
            id=data.get("id"),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            skill=data.get("skill", 0),
            is_defense=bool(data.get("is_defense", False)),
            is_attending=bool(data.get("is_attending", True)),
            group_code=data.get("group_code"),
        )


@dataclass
class Team:
    """One side of a generated game, split by position."""

    forwards: list[Player] = field(default_factory=list)
    defensemen: list[Player] = field(default_factory=list)
    group_code: Optional[str] = None

    @property
    def players(self) -> list[Player]:
        """Forwards followed by defensemen."""
        return [*self.forwards, *self.defensemen]

    def __len__(self) -> int:
        return len(self.forwards) + len(self.defensemen)


@dataclass
class Teams:
    """The two teams produced for an event."""

    red: Team = field(default_factory=Team)
    white: Team = field(default_factory=Team)

    def to_dict(self) -> dict:
        """Serialize to the JSON blob stored per event."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Teams":
        """Rehydrate a stored teams blob."""

        def _team(raw: Optional[dict]) -> Team:
            raw = raw or {}
            return Team(
                forwards=[Player.from_dict(p) for p in raw.get("forwards", [])],
                defensemen=[Player.from_dict(p) for p in raw.get("defensemen", [])],
                group_code=raw.get("group_code"),
            )

        return cls(red=_team(data.get("red")), white=_team(data.get("white")))


@dataclass
class TeamStats:
    """Summary numbers for a single team."""

    total_players: int
    average_skill: float
    forwards_count: int
    defense_count: int
