from typing import List, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.exceptions import TournamentError
from app.services.tournament_service import TournamentService
from app.services.round_service import RoundService
from app.schemas import tournament_schemas, participant_schemas, match_schemas
from app.api.dependencies import get_tournament_service, get_round_service, get_current_user_id
from app.api.errors import to_http_exception

router = APIRouter()

@router.post("/", response_model=tournament_schemas.TournamentDetail, status_code=status.HTTP_201_CREATED)
async def create_tournament_endpoint(
    tournament_in: tournament_schemas.TournamentCreate,
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        return service.create_tournament(**tournament_in.model_dump())
    except TournamentError as e:
        raise to_http_exception(e)

@router.get("/", response_model=List[tournament_schemas.TournamentRead])
async def list_tournaments_endpoint(
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        return service.list_tournaments()
    except TournamentError as e:
        raise to_http_exception(e)

@router.get("/{tournament_id}", response_model=tournament_schemas.TournamentDetail)
async def get_tournament_endpoint(
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        return service.get_tournament(tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)

@router.put("/{tournament_id}", response_model=tournament_schemas.TournamentDetail)
async def update_tournament_endpoint(
    tournament_id: int,
    tournament_in: tournament_schemas.TournamentUpdate,
    service: TournamentService = Depends(get_tournament_service),
):
    # Only the fields present in the body are touched; explicit nulls clear a value
    update_data = tournament_in.model_dump(exclude_unset=True)
    try:
        return service.update_tournament(tournament_id, **update_data)
    except TournamentError as e:
        raise to_http_exception(e)

@router.delete("/{tournament_id}", response_model=Dict[str, str])
async def delete_tournament_endpoint(
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        service.delete_tournament(tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)
    return {"message": "Tournament and related data deleted"}

@router.post("/{tournament_id}/join", response_model=participant_schemas.ParticipantRead, status_code=status.HTTP_201_CREATED)
async def join_tournament_endpoint(
    tournament_id: int,
    current_user_id: str = Depends(get_current_user_id),
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        return service.join_tournament(tournament_id, current_user_id)
    except TournamentError as e:
        raise to_http_exception(e)

@router.get("/{tournament_id}/participants", response_model=List[participant_schemas.ParticipantRead])
async def list_participants_endpoint(
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        return service.list_participants(tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)

@router.post("/{tournament_id}/start", response_model=match_schemas.RoundCreated)
async def start_next_round_endpoint(
    tournament_id: int,
    round_service: RoundService = Depends(get_round_service),
):
    """
    Creates the next round. Round-robin for up to 10 participants, Swiss above that.
    Rejected while the previous round still has unscored matches.
    """
    try:
        outcome = round_service.start_next_round(tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)
    return match_schemas.RoundCreated.model_validate(outcome)

@router.get("/{tournament_id}/standings", response_model=List[participant_schemas.StandingRead])
async def get_standings_endpoint(
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        return service.get_standings(tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)

@router.post("/{tournament_id}/close", response_model=tournament_schemas.TournamentClosed)
async def close_tournament_endpoint(
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        outcome = service.close_tournament(tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)
    return tournament_schemas.TournamentClosed.model_validate(outcome)

@router.post("/{tournament_id}/reset", response_model=tournament_schemas.TournamentDetail)
async def reset_tournament_endpoint(
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        return service.reset_tournament(tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)
