"""SQLAlchemy-backed persistence for tournaments, participants and matches.

Every write goes through ``_unit_of_work``: it commits once at the end or
rolls everything back, and storage failures come out as the engine's own
error kinds instead of raw SQLAlchemy exceptions.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, PersistenceError, TournamentError
from app.models import Match, Participant, Tournament
from app.models.round_plan import RoundBatch

logger = logging.getLogger(__name__)

class TournamentRepository:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _reading(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.exception("Persistence failure while trying to %s", action)
            raise PersistenceError(f"Could not {action}") from e

    @contextmanager
    def _unit_of_work(self, action: str):
        try:
            yield
            self.db.commit()
        except TournamentError:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Integrity violation while trying to %s: %s", action, e.orig)
            raise ConflictError(f"Could not {action}: record already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Persistence failure while trying to %s", action)
            raise PersistenceError(f"Could not {action}") from e

    # --- Tournaments ---

    def get_tournament(self, tournament_id: int) -> Optional[Tournament]:
        with self._reading("load tournament"):
            return self.db.query(Tournament).filter(Tournament.id == tournament_id).first()

    def list_tournaments(self) -> List[Tournament]:
        with self._reading("list tournaments"):
            return self.db.query(Tournament).order_by(Tournament.created_at.desc(), Tournament.id.desc()).all()

    def create_tournament(self, name: str, time_game: Optional[int], started_at: Optional[datetime],
                          ended_at: Optional[datetime] = None) -> Tournament:
        db_tournament = Tournament(name=name, time_game=time_game, started_at=started_at, ended_at=ended_at)
        with self._unit_of_work("create tournament"):
            self.db.add(db_tournament)
        self.db.refresh(db_tournament)
        return db_tournament

    def update_tournament(self, tournament_id: int, fields: Dict[str, Any]) -> Tournament:
        with self._unit_of_work("update tournament"):
            db_tournament = self._require_tournament(tournament_id)
            for key, value in fields.items():
                setattr(db_tournament, key, value)
        self.db.refresh(db_tournament)
        return db_tournament

    def set_tournament_started(self, tournament_id: int, started_at: datetime) -> None:
        with self._unit_of_work("mark tournament started"):
            self._require_tournament(tournament_id).started_at = started_at

    def close_tournament(self, tournament_id: int, ended_at: datetime, winner_id: Optional[int]) -> Tournament:
        with self._unit_of_work("close tournament"):
            db_tournament = self._require_tournament(tournament_id)
            db_tournament.ended_at = ended_at
            db_tournament.winner_id = winner_id
        self.db.refresh(db_tournament)
        return db_tournament

    def reset_tournament(self, tournament_id: int) -> None:
        """Drop every match and zero the bye counters. Participants stay."""
        with self._unit_of_work("reset tournament"):
            self._require_tournament(tournament_id)
            self.db.query(Match).filter(Match.tournament_id == tournament_id).delete(synchronize_session=False)
            self.db.query(Participant).filter(Participant.tournament_id == tournament_id).update(
                {Participant.bye_count: 0}, synchronize_session=False
            )

    def delete_tournament(self, tournament_id: int) -> None:
        with self._unit_of_work("delete tournament"):
            db_tournament = self._require_tournament(tournament_id)
            # The winner FK points at a participant that is about to go away
            db_tournament.winner_id = None
            self.db.flush()
            self.db.query(Match).filter(Match.tournament_id == tournament_id).delete(synchronize_session=False)
            self.db.query(Participant).filter(Participant.tournament_id == tournament_id).delete(synchronize_session=False)
            self.db.query(Tournament).filter(Tournament.id == tournament_id).delete(synchronize_session=False)

    def _require_tournament(self, tournament_id: int, for_update: bool = False) -> Tournament:
        query = self.db.query(Tournament).filter(Tournament.id == tournament_id)
        if for_update:
            query = query.with_for_update()
        db_tournament = query.first()
        if db_tournament is None:
            raise NotFoundError("Tournament not found")
        return db_tournament

    # --- Participants ---

    def get_participants(self, tournament_id: int) -> List[Participant]:
        """Participants in join order."""
        with self._reading("load participants"):
            return self.db.query(Participant).filter(
                Participant.tournament_id == tournament_id
            ).order_by(Participant.created_at.asc(), Participant.id.asc()).all()

    def get_participant(self, participant_id: int) -> Optional[Participant]:
        with self._reading("load participant"):
            return self.db.query(Participant).filter(Participant.id == participant_id).first()

    def find_participant(self, tournament_id: int, user_id: str) -> Optional[Participant]:
        with self._reading("load participant"):
            return self.db.query(Participant).filter(
                Participant.tournament_id == tournament_id,
                Participant.user_id == user_id,
            ).first()

    def create_participant(self, tournament_id: int, user_id: str) -> Participant:
        db_participant = Participant(tournament_id=tournament_id, user_id=user_id, bye_count=0)
        try:
            with self._unit_of_work("join tournament"):
                self.db.add(db_participant)
        except ConflictError as e:
            raise ConflictError("Already joined") from e
        self.db.refresh(db_participant)
        return db_participant

    # --- Matches ---

    def get_matches(self, tournament_id: int, round: Optional[int] = None) -> List[Match]:
        with self._reading("load matches"):
            query = self.db.query(Match).filter(Match.tournament_id == tournament_id)
            if round is not None:
                query = query.filter(Match.round == round)
            return query.order_by(Match.round.asc(), Match.id.asc()).all()

    def get_match(self, match_id: int) -> Optional[Match]:
        with self._reading("load match"):
            return self.db.query(Match).filter(Match.id == match_id).first()

    def max_round(self, tournament_id: int) -> int:
        with self._reading("load current round"):
            return self._max_round(tournament_id)

    def _max_round(self, tournament_id: int) -> int:
        value = self.db.query(func.max(Match.round)).filter(Match.tournament_id == tournament_id).scalar()
        return value or 0

    def create_matches_and_increment_byes(self, batch: RoundBatch) -> List[Match]:
        """Persist a whole round: its matches, the bye counters and the started-at touch."""
        created: List[Match] = []
        with self._unit_of_work(f"create round {batch.round}"):
            db_tournament = self._require_tournament(batch.tournament_id, for_update=True)

            current = self._max_round(batch.tournament_id)
            if batch.round != current + 1:
                raise ConflictError(
                    f"Round {batch.round} cannot be created, latest round is {current}"
                )

            for planned in batch.matches:
                db_match = Match(
                    tournament_id=batch.tournament_id,
                    round=batch.round,
                    player_a_id=planned.player_a_id,
                    player_b_id=planned.player_b_id,
                    score_a=planned.score_a,
                    score_b=planned.score_b,
                )
                self.db.add(db_match)
                created.append(db_match)

            for participant_id in batch.bye_participant_ids:
                self.db.query(Participant).filter(Participant.id == participant_id).update(
                    {Participant.bye_count: Participant.bye_count + 1}, synchronize_session=False
                )

            if batch.started_at is not None:
                db_tournament.started_at = batch.started_at

        for db_match in created:
            self.db.refresh(db_match)
        return created

    def update_match_score(self, match_id: int, score_a: float, score_b: float) -> Match:
        with self._unit_of_work("record match result"):
            db_match = self.db.query(Match).filter(Match.id == match_id).first()
            if db_match is None:
                raise NotFoundError("Match not found")
            db_match.score_a = score_a
            db_match.score_b = score_b
        self.db.refresh(db_match)
        return db_match
