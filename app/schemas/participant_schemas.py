from pydantic import BaseModel
from datetime import datetime

class ParticipantBase(BaseModel):
    tournament_id: int
    user_id: str

class ParticipantRead(ParticipantBase):
    id: int
    bye_count: int
    created_at: datetime

    class Config:
        from_attributes = True

class StandingRead(BaseModel):
    rank: int
    participant_id: int
    user_id: str
    points: float
    bye_count: int

    class Config:
        from_attributes = True
