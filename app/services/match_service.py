import logging
import math
from enum import Enum
from typing import List, Optional, Tuple

from app.core.exceptions import NotFoundError, ValidationError
from app.models import Match
from app.models.match import BYE_SCORE
from app.services.tournament_repository import TournamentRepository

logger = logging.getLogger(__name__)

RESULT_SCORES = {
    "A": (1.0, 0.0),
    "B": (0.0, 1.0),
    "draw": (0.5, 0.5),
}
BYE_RESULTS = {"A", "draw"} # there is no opponent, both mean "bye completed"
ALLOWED_SCORES = (0.0, 0.5, 1.0)
SCORE_TOLERANCE = 1e-9


def _is_number(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)


def _normalize_result(result) -> Optional[str]:
    if isinstance(result, Enum):
        return result.value
    return result


def resolve_scores(is_bye: bool,
                   result=None,
                   score_a=None,
                   score_b=None) -> Tuple[float, float]:
    """
    Validates one of the two accepted input shapes and returns (score_a, score_b).
    Either a symbolic ``result`` ("A", "B", "draw") or explicit numeric scores, never both.
    Raises ValidationError for anything else.
    """
    result = _normalize_result(result)
    has_scores = score_a is not None or score_b is not None

    if result is not None and has_scores:
        raise ValidationError("Provide either result or scoreA/scoreB, not both")

    if is_bye:
        if result is not None:
            if result not in BYE_RESULTS:
                raise ValidationError("Invalid result for bye match")
            return BYE_SCORE, 0.0
        if score_a is not None:
            if not _is_number(score_a) or score_a != BYE_SCORE:
                raise ValidationError("Bye score must be 0.5")
            if score_b is not None and (not _is_number(score_b) or score_b != 0):
                raise ValidationError("Bye opponent score must be 0")
            return BYE_SCORE, 0.0
        raise ValidationError("Missing result for bye match")

    if result is not None:
        if result not in RESULT_SCORES:
            raise ValidationError("Invalid result value")
        return RESULT_SCORES[result]

    if not (_is_number(score_a) and _is_number(score_b)):
        raise ValidationError("Provide either result or both scoreA and scoreB")
    if score_a not in ALLOWED_SCORES or score_b not in ALLOWED_SCORES:
        raise ValidationError("Scores must be 0, 0.5 or 1")
    if abs(score_a + score_b - 1) > SCORE_TOLERANCE:
        raise ValidationError("Scores must sum to 1")
    return float(score_a), float(score_b)


class MatchService:
    def __init__(self, repository: TournamentRepository):
        self.repository = repository

    def get_match(self, match_id: int, tournament_id: Optional[int] = None) -> Match:
        db_match = self.repository.get_match(match_id)
        if db_match is None or (tournament_id is not None and db_match.tournament_id != tournament_id):
            raise NotFoundError("Match not found")
        return db_match

    def list_matches(self, tournament_id: int, round: Optional[int] = None) -> List[Match]:
        if self.repository.get_tournament(tournament_id) is None:
            raise NotFoundError("Tournament not found")
        return self.repository.get_matches(tournament_id, round=round)

    def set_match_result(self,
                         match_id: int,
                         result=None,
                         score_a=None,
                         score_b=None,
                         tournament_id: Optional[int] = None) -> Match:
        """
        Records (or corrects) the score of one match.
        Results stay editable: the next round is gated on completeness, not immutability.
        """
        db_match = self.get_match(match_id, tournament_id=tournament_id)
        new_a, new_b = resolve_scores(db_match.is_bye, result=result, score_a=score_a, score_b=score_b)

        updated = self.repository.update_match_score(match_id, new_a, new_b)
        logger.info(
            "Match %s (tournament %s, round %s) scored %s-%s",
            updated.id, updated.tournament_id, updated.round, new_a, new_b,
        )
        return updated
