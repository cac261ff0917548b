"""Tests for tournament session lifecycle."""
import pytest

from roster_balancer.models.player import Player
from roster_balancer.models.tournament import TournamentPhase, TournamentSession
from roster_balancer.services.tournament_engine import (
    InvalidWinnerError,
    TournamentEngine,
    TournamentStateError,
)


@pytest.fixture
def engine():
    return TournamentEngine()


@pytest.fixture
def session():
    roster = [
        Player(id=i, first_name=f"P{i}", last_name="Test", skill=5, is_defense=i % 2 == 0)
        for i in range(1, 5)
    ]
    return TournamentSession(session_id="test", roster=roster)


def _play_out(engine, session, order):
    position = {key: i for i, key in enumerate(order)}
    while session.current_matchup is not None:
        m = session.current_matchup
        winner = m.player1_id if position[m.player1_id] < position[m.player2_id] else m.player2_id
        engine.record_session_result(session, winner)


def test_new_session_starts_in_setup(session):
    assert session.phase == TournamentPhase.SETUP
    assert session.current_matchup is None
    assert session.progress_percentage == 0.0


def test_start_moves_to_comparing(engine, session):
    engine.start_tournament(session)

    assert session.phase == TournamentPhase.COMPARING
    assert session.total_matchups == 6
    assert session.completed_matchups == 0
    assert session.current_matchup.id == "m1"
    assert list(session.players) == ["1", "2", "3", "4"]


def test_start_with_one_player_stays_in_setup(engine):
    lonely = TournamentSession(
        session_id="solo",
        roster=[Player(id=1, first_name="A", last_name="B", skill=5)],
    )

    engine.start_tournament(lonely)

    assert lonely.phase == TournamentPhase.SETUP
    assert lonely.matchups == []


def test_progress_tracks_recorded_results(engine, session):
    engine.start_tournament(session)
    first = session.current_matchup

    engine.record_session_result(session, first.player1_id)

    assert session.completed_matchups == 1
    assert session.progress_percentage == pytest.approx(100 / 6)
    assert session.current_matchup.id == "m2"
    assert session.phase == TournamentPhase.COMPARING


def test_last_result_produces_rankings(engine, session):
    engine.start_tournament(session)

    _play_out(engine, session, ["4", "2", "1", "3"])

    assert session.phase == TournamentPhase.RESULTS
    assert session.progress_percentage == 100.0
    assert [r.player_id for r in session.rankings] == ["4", "2", "1", "3"]
    assert session.players["4"].wins == 3
    assert session.players["4"].comparisons == 3
    assert session.players["3"].wins == 0


def test_invalid_winner_leaves_session_unchanged(engine, session):
    engine.start_tournament(session)
    current = session.current_matchup  # 1 vs 2

    with pytest.raises(InvalidWinnerError):
        engine.record_session_result(session, "4")

    assert session.current_matchup == current
    assert session.completed_matchups == 0


def test_record_outside_comparing_is_rejected(engine, session):
    with pytest.raises(TournamentStateError):
        engine.record_session_result(session, "1")

    engine.start_tournament(session)
    _play_out(engine, session, ["1", "2", "3", "4"])

    with pytest.raises(TournamentStateError):
        engine.record_session_result(session, "1")


def test_record_specific_matchup(engine, session):
    engine.start_tournament(session)

    engine.record_session_result(session, "4", matchup_id="m6")  # 3 vs 4

    assert session.matchups[5].winner_id == "4"
    assert session.current_matchup.id == "m1"


def test_apply_requires_results(engine, session):
    engine.start_tournament(session)

    with pytest.raises(TournamentStateError):
        engine.apply_session_rankings(session)


def test_apply_after_results_updates_roster(engine, session):
    engine.start_tournament(session)
    _play_out(engine, session, ["4", "2", "1", "3"])

    updated = engine.apply_session_rankings(session)

    assert [p.id for p in updated] == [1, 2, 3, 4]
    assert {p.id: p.skill for p in updated} == {4: 10, 2: 7, 1: 4, 3: 1}


def test_reset_clears_everything(engine, session):
    engine.start_tournament(session)
    _play_out(engine, session, ["1", "2", "3", "4"])

    engine.reset_tournament(session)

    assert session.phase == TournamentPhase.SETUP
    assert session.players == {}
    assert session.matchups == []
    assert session.rankings == []
    assert len(session.roster) == 4


def test_restart_discards_progress(engine, session):
    engine.start_tournament(session)
    engine.record_session_result(session, session.current_matchup.player1_id)

    engine.start_tournament(session)

    assert session.completed_matchups == 0
    assert session.phase == TournamentPhase.COMPARING
