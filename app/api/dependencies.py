import random
from typing import Generator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.match_service import MatchService
from app.services.round_service import RoundService
from app.services.tournament_repository import TournamentRepository
from app.services.tournament_service import TournamentService

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Seeded side assignment is derived per round by RoundService from PAIRING_SEED
def get_rng() -> random.Random:
    return random.Random()

def get_repository(db: Session = Depends(get_db)) -> TournamentRepository:
    return TournamentRepository(db)

def get_tournament_service(repository: TournamentRepository = Depends(get_repository)) -> TournamentService:
    return TournamentService(repository)

def get_round_service(
    repository: TournamentRepository = Depends(get_repository),
    rng: random.Random = Depends(get_rng),
) -> RoundService:
    return RoundService(repository, rng=rng, seed=settings.PAIRING_SEED)

def get_match_service(repository: TournamentRepository = Depends(get_repository)) -> MatchService:
    return MatchService(repository)

# Token verification lives in the auth gateway in front of this service;
# it forwards the authenticated user id in this header.
async def get_current_user_id(x_user_id: str = Header(None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return x_user_id
