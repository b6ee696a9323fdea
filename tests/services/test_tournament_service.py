from datetime import datetime

import pytest

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, PreconditionError, ValidationError
from app.services.locks import get_tournament_lock
from app.services.match_service import MatchService
from app.services.round_service import RoundService
from app.services.tournament_service import TournamentService


@pytest.fixture
def tournament_service(repository):
    return TournamentService(repository)

@pytest.fixture
def round_service(repository, rng):
    return RoundService(repository, rng=rng)

@pytest.fixture
def match_service(repository):
    return MatchService(repository)


class TestTournamentCrud:

    def test_create_tournament_defaults(self, tournament_service):
        created = tournament_service.create_tournament("Spring Open")

        assert created.id is not None
        assert created.name == "Spring Open"
        assert created.time_game == settings.DEFAULT_TIME_GAME
        assert created.started_at is not None
        assert created.ended_at is None
        assert created.winner_id is None

    def test_create_tournament_keeps_given_values(self, tournament_service):
        start = datetime(2024, 3, 1, 18, 0)
        created = tournament_service.create_tournament("Blitz Night", time_game=3, started_at=start)

        assert created.time_game == 3
        assert created.started_at == start

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_create_tournament_invalid_name(self, tournament_service, name):
        with pytest.raises(ValidationError, match="Missing or invalid name"):
            tournament_service.create_tournament(name)

    @pytest.mark.parametrize("time_game", [0, -5, True, "10"])
    def test_create_tournament_invalid_time_game(self, tournament_service, time_game):
        with pytest.raises(ValidationError, match="timeGame"):
            tournament_service.create_tournament("Rapid", time_game=time_game)

    def test_get_tournament_not_found(self, tournament_service):
        with pytest.raises(NotFoundError, match="Tournament not found"):
            tournament_service.get_tournament(404)

    def test_list_tournaments(self, tournament_service):
        tournament_service.create_tournament("One")
        tournament_service.create_tournament("Two")

        assert {t.name for t in tournament_service.list_tournaments()} == {"One", "Two"}

    def test_update_tournament_fields(self, tournament_service):
        created = tournament_service.create_tournament("Draft")

        updated = tournament_service.update_tournament(created.id, name="Final name", time_game=15)

        assert updated.name == "Final name"
        assert updated.time_game == 15

    def test_update_tournament_rejects_foreign_winner(self, tournament_service, make_tournament):
        tournament, _ = make_tournament(2)
        _, (stranger,) = make_tournament(1, name="Elsewhere")

        with pytest.raises(ValidationError, match="Invalid winnerId"):
            tournament_service.update_tournament(tournament.id, winner_id=stranger.id)

    def test_update_tournament_rejects_unknown_fields(self, tournament_service, make_tournament):
        tournament, _ = make_tournament()

        with pytest.raises(ValidationError, match="Unknown fields"):
            tournament_service.update_tournament(tournament.id, bye_count=3)


class TestParticipants:

    def test_join_in_order(self, tournament_service, make_tournament):
        tournament, _ = make_tournament()

        first = tournament_service.join_tournament(tournament.id, "alice")
        second = tournament_service.join_tournament(tournament.id, "bob")

        assert first.bye_count == 0
        assert [p.id for p in tournament_service.list_participants(tournament.id)] == [first.id, second.id]

    def test_join_twice_is_a_conflict(self, tournament_service, make_tournament):
        tournament, _ = make_tournament()
        tournament_service.join_tournament(tournament.id, "alice")

        with pytest.raises(ConflictError, match="Already joined"):
            tournament_service.join_tournament(tournament.id, "alice")

    def test_repository_unique_constraint_reports_conflict(self, repository, make_tournament):
        tournament, _ = make_tournament()
        repository.create_participant(tournament.id, "alice")

        with pytest.raises(ConflictError, match="Already joined"):
            repository.create_participant(tournament.id, "alice")

        assert len(repository.get_participants(tournament.id)) == 1

    def test_same_user_in_two_tournaments(self, tournament_service, make_tournament):
        first, _ = make_tournament(name="A")
        second, _ = make_tournament(name="B")

        tournament_service.join_tournament(first.id, "alice")
        tournament_service.join_tournament(second.id, "alice")

    def test_join_unknown_tournament(self, tournament_service):
        with pytest.raises(NotFoundError):
            tournament_service.join_tournament(404, "alice")


class TestStandingsAndClose:

    def test_close_without_rounds(self, tournament_service, make_tournament):
        tournament, _ = make_tournament(2)

        with pytest.raises(PreconditionError, match="No rounds created"):
            tournament_service.close_tournament(tournament.id)

    def test_close_with_unscored_round(self, tournament_service, round_service, make_tournament):
        tournament, _ = make_tournament(2)
        round_service.start_next_round(tournament.id)

        with pytest.raises(PreconditionError, match="Round 1 not complete"):
            tournament_service.close_tournament(tournament.id)

    def test_draw_winner_is_earliest_joiner(self, tournament_service, round_service, match_service,
                                            repository, make_tournament):
        tournament, (first, second) = make_tournament(2)
        outcome = round_service.start_next_round(tournament.id)
        match_service.set_match_result(outcome.matches[0].id, result="draw")

        closed = tournament_service.close_tournament(tournament.id)

        assert closed.winner_id == first.id
        assert closed.points == {first.id: 0.5, second.id: 0.5}
        stored = repository.get_tournament(tournament.id)
        assert stored.ended_at is not None
        assert stored.winner_id == first.id

    def test_close_picks_points_leader(self, tournament_service, round_service, match_service, make_tournament):
        tournament, participants = make_tournament(3)
        # Everyone plays everyone, the later joiner wins every game
        for _ in range(3):
            outcome = round_service.start_next_round(tournament.id)
            for m in outcome.matches:
                if m.is_bye:
                    continue
                winner_is_a = m.player_a_id > m.player_b_id
                match_service.set_match_result(m.id, result="A" if winner_is_a else "B")

        closed = tournament_service.close_tournament(tournament.id)

        # user-3: 2 wins + bye = 2.5
        assert closed.winner_id == participants[2].id
        assert closed.points[participants[2].id] == 2.5

    def test_close_twice_rejected(self, tournament_service, round_service, match_service, make_tournament):
        tournament, _ = make_tournament(2)
        outcome = round_service.start_next_round(tournament.id)
        match_service.set_match_result(outcome.matches[0].id, result="A")
        tournament_service.close_tournament(tournament.id)

        with pytest.raises(PreconditionError, match="already closed"):
            tournament_service.close_tournament(tournament.id)

    def test_standings_ranked(self, tournament_service, round_service, match_service, make_tournament):
        tournament, participants = make_tournament(4)
        outcome = round_service.start_next_round(tournament.id)
        for m in outcome.matches:
            match_service.set_match_result(m.id, score_a=1, score_b=0)

        standings = tournament_service.get_standings(tournament.id)

        assert [s.rank for s in standings] == [1, 2, 3, 4]
        assert [s.points for s in standings] == [1.0, 1.0, 0.0, 0.0]
        winners = {m.player_a_id for m in outcome.matches}
        assert {s.participant_id for s in standings[:2]} == winners
        assert sum(s.points for s in standings) == 2.0


class TestResetAndDelete:

    def test_reset_keeps_participants_and_timestamps(self, tournament_service, round_service,
                                                     repository, make_tournament):
        tournament, participants = make_tournament(3)
        round_service.start_next_round(tournament.id)
        started_at = repository.get_tournament(tournament.id).started_at

        reset = tournament_service.reset_tournament(tournament.id)

        assert repository.get_matches(tournament.id) == []
        assert repository.max_round(tournament.id) == 0
        assert [p.bye_count for p in repository.get_participants(tournament.id)] == [0, 0, 0]
        assert len(repository.get_participants(tournament.id)) == 3
        assert reset.started_at == started_at

    def test_reset_allows_round_one_again(self, tournament_service, round_service, make_tournament):
        tournament, _ = make_tournament(2)
        round_service.start_next_round(tournament.id)
        tournament_service.reset_tournament(tournament.id)

        assert round_service.start_next_round(tournament.id).round == 1

    def test_delete_closed_tournament(self, tournament_service, round_service, match_service,
                                      repository, make_tournament):
        tournament, _ = make_tournament(2)
        tournament_id = tournament.id
        outcome = round_service.start_next_round(tournament_id)
        match_service.set_match_result(outcome.matches[0].id, result="B")
        tournament_service.close_tournament(tournament_id)

        assert tournament_service.delete_tournament(tournament_id) is True

        assert repository.get_tournament(tournament_id) is None
        assert repository.get_matches(tournament_id) == []
        assert repository.get_participants(tournament_id) == []
        with pytest.raises(NotFoundError):
            tournament_service.get_tournament(tournament_id)

    def test_delete_unknown(self, tournament_service):
        with pytest.raises(NotFoundError):
            tournament_service.delete_tournament(404)

    def test_delete_forgets_tournament_lock(self, tournament_service, make_tournament):
        tournament, _ = make_tournament(2)
        tournament_id = tournament.id
        before = get_tournament_lock(tournament_id)

        tournament_service.delete_tournament(tournament_id)

        assert get_tournament_lock(tournament_id) is not before

    def test_set_tournament_started(self, repository, make_tournament):
        tournament, _ = make_tournament()
        started = datetime(2024, 5, 4, 9, 30)

        repository.set_tournament_started(tournament.id, started)

        assert repository.get_tournament(tournament.id).started_at == started

    def test_set_tournament_started_unknown(self, repository):
        with pytest.raises(NotFoundError):
            repository.set_tournament_started(404, datetime(2024, 5, 4))
