"""Pairwise ranking tournament.

Players are compared head-to-head in a full round-robin ("who is better,
A or B?"). Once every pair has a winner, players are ranked by win count
and the ranking is mapped back onto the roster's skill scale so the team
generator can use it.

Usage:
    engine = TournamentEngine()
    session = TournamentSession(session_id="abc", roster=players)
    engine.start_tournament(session)
    while session.current_matchup:
        engine.record_session_result(session, winner_id=...)
    updated_players = engine.apply_session_rankings(session)
"""

import logging
import math
import random
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Optional

from roster_balancer.models.player import Player
from roster_balancer.models.tournament import (
    Matchup,
    PlayerRanking,
    TournamentPhase,
    TournamentPlayer,
    TournamentSession,
)

logger = logging.getLogger(__name__)

MIN_TOURNAMENT_PLAYERS = 2
# Comparisons needed before a ranking is considered fully confident
CONFIDENCE_COMPARISONS = 5


class InvalidWinnerError(ValueError):
    """Winner is not one of the two players in the matchup."""


class MatchupNotFoundError(ValueError):
    """No matchup with the requested id."""


class TournamentStateError(RuntimeError):
    """Operation not allowed in the session's current phase."""


class TournamentIncompleteError(TournamentStateError):
    """Rankings requested while matchups are still unresolved."""


class TournamentEngine:
    """Generates matchups, records results and derives rankings."""

    def __init__(self, min_skill: int = 1, max_skill: int = 10):
        if min_skill > max_skill:
            raise ValueError(f"min_skill ({min_skill}) must not exceed max_skill ({max_skill})")
        self.min_skill = min_skill
        self.max_skill = max_skill

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def initialize_tournament_players(self, players: Iterable[Player]) -> dict[str, TournamentPlayer]:
        """Wrap roster players with tournament keys.

        The persistence id is reused as the key when every player has one and
        they are all distinct; otherwise keys fall back to the roster position
        (``p1``, ``p2``, ...). Insertion order follows the input order.
        """
        players = list(players)
        ids = [p.id for p in players]
        use_ids = None not in ids and len({str(i) for i in ids}) == len(ids)

        tournament_players: dict[str, TournamentPlayer] = {}
        for index, player in enumerate(players):
            key = str(player.id) if use_ids else f"p{index + 1}"
            tournament_players[key] = TournamentPlayer(
                key=key,
                name=player.full_name,
                original_player=player,
            )
        return tournament_players

    def generate_matchups(self, keys: list[str], shuffle_seed: Optional[int] = None) -> list[Matchup]:
        """Every unordered pair of keys exactly once.

        Pairs come out as (keys[i], keys[j]) for i < j. A shuffle seed only
        changes presentation order and is reproducible for the same seed.
        """
        if len(keys) < MIN_TOURNAMENT_PLAYERS:
            return []

        matchups: list[Matchup] = []
        for i, first in enumerate(keys):
            for second in keys[i + 1:]:
                matchups.append(
                    Matchup(id=f"m{len(matchups) + 1}", player1_id=first, player2_id=second)
                )

        if shuffle_seed is not None:
            random.Random(shuffle_seed).shuffle(matchups)
        return matchups

    def record_result(self, matchups: list[Matchup], matchup_id: str, winner_id: str) -> list[Matchup]:
        """Return a copy of ``matchups`` with one result recorded.

        Recording a matchup that already has a winner overwrites it.

        Raises:
            MatchupNotFoundError: No matchup has ``matchup_id``.
            InvalidWinnerError: ``winner_id`` is not one of the paired keys.
        """
        target = next((m for m in matchups if m.id == matchup_id), None)
        if target is None:
            raise MatchupNotFoundError(f"Matchup {matchup_id} not found")
        if not target.involves(winner_id):
            raise InvalidWinnerError(
                f"{winner_id} is not part of matchup {matchup_id} "
                f"({target.player1_id} vs {target.player2_id})"
            )

        resolved = replace(target, winner_id=winner_id, timestamp=datetime.now(timezone.utc))
        return [resolved if m.id == matchup_id else m for m in matchups]

    @staticmethod
    def next_pending_matchup(matchups: list[Matchup]) -> Optional[Matchup]:
        """First matchup, in list order, that has no winner yet."""
        return next((m for m in matchups if not m.is_resolved), None)

    def calculate_final_rankings(
        self,
        tournament_players: dict[str, TournamentPlayer],
        matchups: list[Matchup],
    ) -> list[PlayerRanking]:
        """Rank players by wins once every matchup is resolved.

        Ordering is wins (desc), then the player's original skill (desc), then
        their position in ``tournament_players``. Ranks are the 1-based
        positions in that ordering, so no two players share a rank.

        Raises:
            TournamentIncompleteError: Some matchup has no winner.
        """
        pending = sum(1 for m in matchups if not m.is_resolved)
        if pending:
            raise TournamentIncompleteError(f"{pending} matchups still unresolved")

        wins, played = self._tally(matchups)
        order = {key: index for index, key in enumerate(tournament_players)}
        ranked = sorted(
            tournament_players.values(),
            key=lambda tp: (-wins[tp.key], -tp.original_player.skill, order[tp.key]),
        )

        rankings = []
        for rank, tp in enumerate(ranked, start=1):
            games = played[tp.key]
            rankings.append(
                PlayerRanking(
                    player_id=tp.key,
                    rank=rank,
                    score=round(wins[tp.key] / games, 3) if games else 0.0,
                    wins=wins[tp.key],
                    confidence=min(1.0, games / CONFIDENCE_COMPARISONS),
                )
            )
        return rankings

    def skill_for_rank(self, rank: int, total: int) -> int:
        """Linear map of rank 1..total onto max_skill..min_skill.

        Values are rounded half up. With at most ``max_skill - min_skill + 1``
        players every rank gets a distinct skill; beyond that neighbouring
        ranks may share one, but a better rank never gets a lower skill.
        """
        if total <= 1:
            return self.max_skill
        span = self.max_skill - self.min_skill
        value = self.max_skill - span * (rank - 1) / (total - 1)
        return math.floor(value + 0.5)

    def apply_rankings_to_players(
        self,
        rankings: list[PlayerRanking],
        tournament_players: dict[str, TournamentPlayer],
        original_players: list[Player],
    ) -> list[Player]:
        """Copy ``original_players`` with skill replaced by ranked skill.

        Output has the same length and order as the input. Players that did
        not take part in the tournament come back unchanged.
        """
        skill_by_key = {
            r.player_id: self.skill_for_rank(r.rank, len(rankings)) for r in rankings
        }
        key_by_identity = {id(tp.original_player): key for key, tp in tournament_players.items()}
        key_by_player_id = {
            tp.original_player.id: key
            for key, tp in tournament_players.items()
            if tp.original_player.id is not None
        }

        updated = []
        for player in original_players:
            key = key_by_identity.get(id(player))
            if key is None and player.id is not None:
                key = key_by_player_id.get(player.id)
            if key in skill_by_key:
                updated.append(replace(player, skill=skill_by_key[key]))
            else:
                updated.append(player)
        return updated

    @staticmethod
    def _tally(matchups: list[Matchup]) -> tuple[Counter, Counter]:
        wins: Counter = Counter()
        played: Counter = Counter()
        for m in matchups:
            played[m.player1_id] += 1
            played[m.player2_id] += 1
            if m.winner_id is not None:
                wins[m.winner_id] += 1
        return wins, played

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------

    def start_tournament(self, session: TournamentSession, shuffle_seed: Optional[int] = None) -> TournamentSession:
        """Build players and matchups for the session's roster.

        Starting again discards any previous progress. With fewer than two
        players the session is left in setup with no matchups.
        """
        if len(session.roster) < MIN_TOURNAMENT_PLAYERS:
            logger.warning(
                f"Session {session.session_id}: need at least {MIN_TOURNAMENT_PLAYERS} players, "
                f"got {len(session.roster)}"
            )
            return self.reset_tournament(session)

        session.players = self.initialize_tournament_players(session.roster)
        session.matchups = self.generate_matchups(list(session.players), shuffle_seed)
        session.rankings = []
        session.phase = TournamentPhase.COMPARING
        logger.info(
            f"Session {session.session_id}: started with {len(session.players)} players, "
            f"{len(session.matchups)} matchups"
        )
        return session

    def record_session_result(
        self,
        session: TournamentSession,
        winner_id: str,
        matchup_id: Optional[str] = None,
    ) -> TournamentSession:
        """Record a winner, defaulting to the session's current matchup.

        Resolving the last open matchup computes rankings and moves the
        session to the results phase.
        """
        if session.phase != TournamentPhase.COMPARING:
            raise TournamentStateError(
                f"Cannot record results while session is in {session.phase.value} phase"
            )

        if matchup_id is None:
            matchup_id = session.current_matchup.id

        session.matchups = self.record_result(session.matchups, matchup_id, winner_id)

        if self.next_pending_matchup(session.matchups) is None:
            self._finish(session)
        return session

    def reset_tournament(self, session: TournamentSession) -> TournamentSession:
        """Drop all tournament progress and return to setup."""
        session.phase = TournamentPhase.SETUP
        session.players = {}
        session.matchups = []
        session.rankings = []
        return session

    def apply_session_rankings(self, session: TournamentSession) -> list[Player]:
        """Roster with skills replaced by the session's final rankings."""
        if session.phase != TournamentPhase.RESULTS:
            raise TournamentStateError(
                f"Rankings are not available in {session.phase.value} phase"
            )
        return self.apply_rankings_to_players(session.rankings, session.players, session.roster)

    def _finish(self, session: TournamentSession) -> None:
        session.rankings = self.calculate_final_rankings(session.players, session.matchups)
        wins, played = self._tally(session.matchups)
        for key, tp in session.players.items():
            tp.wins = wins[key]
            tp.comparisons = played[key]
        session.phase = TournamentPhase.RESULTS
        logger.info(f"Session {session.session_id}: all {len(session.matchups)} matchups resolved")
