from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from .participant_schemas import ParticipantRead
from .match_schemas import MatchRead

class TournamentBase(BaseModel):
    name: str = Field(..., min_length=1)
    time_game: Optional[int] = Field(None, alias="timeGame", description="Game time in minutes (informational)")
    started_at: Optional[datetime] = Field(None, alias="startedAt")
    ended_at: Optional[datetime] = Field(None, alias="endedAt")

    class Config:
        populate_by_name = True

class TournamentCreate(TournamentBase):
    pass

class TournamentUpdate(BaseModel):
    name: Optional[str] = None
    time_game: Optional[int] = Field(None, alias="timeGame")
    started_at: Optional[datetime] = Field(None, alias="startedAt")
    ended_at: Optional[datetime] = Field(None, alias="endedAt")
    winner_id: Optional[int] = Field(None, alias="winnerId")

    class Config:
        populate_by_name = True

class TournamentRead(BaseModel):
    id: int
    name: str
    time_game: Optional[int] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    winner_id: Optional[int] = None
    participants: List[ParticipantRead] = []

    class Config:
        from_attributes = True

class TournamentDetail(TournamentRead):
    matches: List[MatchRead] = []

class TournamentClosed(BaseModel):
    tournament: TournamentDetail
    winner_id: Optional[int] = None
    points: Dict[int, float]

    class Config:
        from_attributes = True
