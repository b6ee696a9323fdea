import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from app.core.config import settings
from app.core.database import utcnow
from app.core.exceptions import NotFoundError, PreconditionError
from app.models import Match
from app.models.round_plan import PairingMode, RoundBatch
from app.services.locks import tournament_lock
from app.services.round_robin_service import (
    generate_round_robin_schedule,
    plan_round_robin_round,
    round_robin_round_count,
)
from app.services.standings_service import compute_standings, is_round_complete
from app.services.swiss_service import build_swiss_pool, pair_swiss_round
from app.services.tournament_repository import TournamentRepository

logger = logging.getLogger(__name__)


@dataclass
class RoundOutcome:
    round: int
    mode: PairingMode
    matches: List[Match] = field(default_factory=list)

    @property
    def matches_created(self) -> int:
        return len(self.matches)

    @property
    def byes(self) -> int:
        return sum(1 for m in self.matches if m.is_bye)


class RoundService:
    """Creates the next round of a tournament.

    Cohorts of up to ``round_robin_max`` participants follow a precomputed
    round-robin schedule; larger cohorts are paired Swiss-style from the
    current standings.
    """

    def __init__(self,
                 repository: TournamentRepository,
                 rng: Optional[random.Random] = None,
                 seed: Optional[int] = settings.PAIRING_SEED,
                 round_robin_max: int = settings.ROUND_ROBIN_MAX_PARTICIPANTS,
                 min_participants: int = settings.MIN_PARTICIPANTS):
        self.repository = repository
        self.rng = rng or random.Random()
        self.seed = seed
        self.round_robin_max = round_robin_max
        self.min_participants = min_participants

    def side_rng(self, tournament_id: int, round_number: int) -> random.Random:
        """Randomness for one round's side assignment.

        With a seed, every round draws from its own stream keyed on tournament and round.
        """
        if self.seed is None:
            return self.rng
        return random.Random(f"{self.seed}:{tournament_id}:{round_number}")

    def pairing_mode(self, num_participants: int) -> PairingMode:
        if num_participants <= self.round_robin_max:
            return PairingMode.ROUND_ROBIN
        return PairingMode.SWISS

    def start_next_round(self, tournament_id: int) -> RoundOutcome:
        with tournament_lock(tournament_id):
            if self.repository.get_tournament(tournament_id) is None:
                raise NotFoundError("Tournament not found")

            participants = self.repository.get_participants(tournament_id)
            if len(participants) < self.min_participants:
                raise PreconditionError("Not enough participants")

            next_round = self.repository.max_round(tournament_id) + 1
            if next_round > 1:
                previous = self.repository.get_matches(tournament_id, round=next_round - 1)
                if not is_round_complete(previous):
                    raise PreconditionError("Previous round not complete")

            mode = self.pairing_mode(len(participants))
            if mode == PairingMode.ROUND_ROBIN:
                if next_round > round_robin_round_count(len(participants)):
                    raise PreconditionError("All rounds already created")
                schedule = generate_round_robin_schedule([p.id for p in participants])
                planned = plan_round_robin_round(
                    schedule[next_round - 1], self.side_rng(tournament_id, next_round)
                )
            else:
                history = self.repository.get_matches(tournament_id)
                standings = compute_standings(history, [p.id for p in participants])
                pool = build_swiss_pool(participants, standings)
                planned = pair_swiss_round(pool, standings)

            batch = RoundBatch(
                tournament_id=tournament_id,
                round=next_round,
                matches=planned,
                started_at=utcnow(),
            )
            created = self.repository.create_matches_and_increment_byes(batch)

        outcome = RoundOutcome(round=next_round, mode=mode, matches=created)
        logger.info(
            "Tournament %s: round %s created (%s), %s matches, %s byes",
            tournament_id, outcome.round, mode.value, outcome.matches_created, outcome.byes,
        )
        return outcome
