import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from app.core.config import settings
from app.core.database import utcnow
from app.core.exceptions import ConflictError, NotFoundError, PreconditionError, ValidationError
from app.models import Participant, Tournament
from app.services.locks import release_tournament_lock, tournament_lock
from app.services.standings_service import (
    compute_standings,
    is_round_complete,
    pick_winner,
    rank_participants,
)
from app.services.tournament_repository import TournamentRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "started_at", "ended_at", "time_game", "winner_id"}


@dataclass
class StandingEntry:
    rank: int
    participant_id: int
    user_id: str
    points: float
    bye_count: int


@dataclass
class CloseOutcome:
    tournament: Tournament
    winner_id: Optional[int]
    points: Dict[int, float] = field(default_factory=dict)


def _validate_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Missing or invalid name")
    return name


def _validate_time_game(time_game) -> int:
    if isinstance(time_game, bool) or not isinstance(time_game, int) or time_game <= 0:
        raise ValidationError("timeGame must be a positive integer (minutes)")
    return time_game


class TournamentService:
    def __init__(self, repository: TournamentRepository):
        self.repository = repository

    def create_tournament(self,
                          name,
                          time_game: Optional[int] = None,
                          started_at: Optional[datetime] = None,
                          ended_at: Optional[datetime] = None) -> Tournament:
        name = _validate_name(name)
        time_game = _validate_time_game(time_game if time_game is not None else settings.DEFAULT_TIME_GAME)

        db_tournament = self.repository.create_tournament(
            name=name,
            time_game=time_game,
            started_at=started_at or utcnow(),
            ended_at=ended_at,
        )
        logger.info("Tournament %s created: %s", db_tournament.id, db_tournament.name)
        return db_tournament

    def get_tournament(self, tournament_id: int) -> Tournament:
        db_tournament = self.repository.get_tournament(tournament_id)
        if db_tournament is None:
            raise NotFoundError("Tournament not found")
        return db_tournament

    def list_tournaments(self) -> List[Tournament]:
        return self.repository.list_tournaments()

    def update_tournament(self, tournament_id: int, **fields) -> Tournament:
        self.get_tournament(tournament_id)

        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        if "name" in fields:
            _validate_name(fields["name"])
        if "time_game" in fields:
            _validate_time_game(fields["time_game"])
        if fields.get("winner_id") is not None:
            participant = self.repository.get_participant(fields["winner_id"])
            if participant is None or participant.tournament_id != tournament_id:
                raise ValidationError("Invalid winnerId")

        return self.repository.update_tournament(tournament_id, fields)

    # --- Participants ---

    def join_tournament(self, tournament_id: int, user_id: str) -> Participant:
        self.get_tournament(tournament_id)
        if not user_id:
            raise ValidationError("Missing user id")
        if self.repository.find_participant(tournament_id, user_id) is not None:
            raise ConflictError("Already joined")

        participant = self.repository.create_participant(tournament_id, user_id)
        logger.info("User %s joined tournament %s as participant %s", user_id, tournament_id, participant.id)
        return participant

    def list_participants(self, tournament_id: int) -> List[Participant]:
        self.get_tournament(tournament_id)
        return self.repository.get_participants(tournament_id)

    def get_standings(self, tournament_id: int) -> List[StandingEntry]:
        self.get_tournament(tournament_id)
        participants = self.repository.get_participants(tournament_id)
        standings = compute_standings(self.repository.get_matches(tournament_id), [p.id for p in participants])

        return [
            StandingEntry(
                rank=position,
                participant_id=p.id,
                user_id=p.user_id,
                points=standings.points_for(p.id),
                bye_count=p.bye_count or 0,
            )
            for position, p in enumerate(rank_participants(participants, standings), start=1)
        ]

    # --- Lifecycle ---

    def close_tournament(self, tournament_id: int) -> CloseOutcome:
        with tournament_lock(tournament_id):
            db_tournament = self.get_tournament(tournament_id)
            if db_tournament.is_closed:
                raise PreconditionError("Tournament already closed")

            max_round = self.repository.max_round(tournament_id)
            if max_round == 0:
                raise PreconditionError("No rounds created")

            for round_number in range(1, max_round + 1):
                if not is_round_complete(self.repository.get_matches(tournament_id, round=round_number)):
                    raise PreconditionError(f"Round {round_number} not complete")

            participants = self.repository.get_participants(tournament_id)
            standings = compute_standings(self.repository.get_matches(tournament_id), [p.id for p in participants])
            winner_id = pick_winner(participants, standings)

            db_tournament = self.repository.close_tournament(tournament_id, utcnow(), winner_id)

        logger.info("Tournament %s closed, winner participant %s", tournament_id, winner_id)
        return CloseOutcome(tournament=db_tournament, winner_id=winner_id, points=dict(standings.points))

    def reset_tournament(self, tournament_id: int) -> Tournament:
        """Remove every round and zero the bye counters; participants and timestamps are kept."""
        with tournament_lock(tournament_id):
            self.get_tournament(tournament_id)
            self.repository.reset_tournament(tournament_id)

        logger.info("Tournament %s reset", tournament_id)
        return self.get_tournament(tournament_id)

    def delete_tournament(self, tournament_id: int) -> bool:
        with tournament_lock(tournament_id):
            self.get_tournament(tournament_id)
            self.repository.delete_tournament(tournament_id)
        release_tournament_lock(tournament_id)

        logger.info("Tournament %s deleted", tournament_id)
        return True
