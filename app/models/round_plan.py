from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.match import BYE_SCORE

class PairingMode(str, Enum):
    ROUND_ROBIN = "round_robin"
    SWISS = "swiss"

class PlannedMatch(BaseModel):
    """A match decided by a pairing generator but not yet persisted."""
    player_a_id: int
    player_b_id: Optional[int] = None # None -> bye

    # Byes are scored at creation, regular matches start unplayed
    score_a: Optional[float] = None
    score_b: Optional[float] = None

    @property
    def is_bye(self) -> bool:
        return self.player_b_id is None

    @classmethod
    def pairing(cls, player_a_id: int, player_b_id: int) -> "PlannedMatch":
        return cls(player_a_id=player_a_id, player_b_id=player_b_id)

    @classmethod
    def bye(cls, participant_id: int) -> "PlannedMatch":
        return cls(player_a_id=participant_id, player_b_id=None, score_a=BYE_SCORE, score_b=0.0)

class RoundBatch(BaseModel):
    """Every write that makes up one new round, submitted as a single unit of work."""
    tournament_id: int
    round: int = Field(ge=1)
    matches: List[PlannedMatch] = Field(default_factory=list)
    started_at: Optional[datetime] = None # touched on the tournament in the same transaction

    @property
    def bye_participant_ids(self) -> List[int]:
        return [m.player_a_id for m in self.matches if m.is_bye]
