from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.models.round_plan import PairingMode

class MatchResult(str, Enum):
    A = "A"
    B = "B"
    DRAW = "draw"

class MatchRead(BaseModel):
    id: int
    tournament_id: int
    round: int
    player_a_id: int
    player_b_id: Optional[int] = None
    score_a: Optional[float] = None
    score_b: Optional[float] = None
    is_bye: bool

    class Config:
        from_attributes = True

class MatchResultUpdate(BaseModel):
    """
    Either ``{"result": "A" | "B" | "draw"}`` or ``{"scoreA": x, "scoreB": y}``.
    snake_case field names are accepted as well.
    """
    result: Optional[MatchResult] = None
    score_a: Optional[float] = Field(None, alias="scoreA")
    score_b: Optional[float] = Field(None, alias="scoreB")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def one_input_shape(self):
        has_scores = self.score_a is not None or self.score_b is not None
        if self.result is not None and has_scores:
            raise ValueError("Provide either result or scoreA/scoreB, not both")
        if self.result is None and not has_scores:
            raise ValueError("Provide either result or scoreA/scoreB")
        return self

class RoundCreated(BaseModel):
    round: int
    mode: PairingMode
    matches_created: int
    byes: int
    matches: List[MatchRead]

    class Config:
        from_attributes = True
        use_enum_values = True
