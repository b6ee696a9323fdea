from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.exceptions import TournamentError
from app.services.match_service import MatchService
from app.schemas import match_schemas
from app.api.dependencies import get_match_service
from app.api.errors import to_http_exception

router = APIRouter()

@router.get("/{tournament_id}/matches", response_model=List[match_schemas.MatchRead])
async def get_tournament_matches_endpoint(
    tournament_id: int,
    round: Optional[int] = Query(None, ge=1),
    service: MatchService = Depends(get_match_service),
):
    try:
        return service.list_matches(tournament_id, round=round)
    except TournamentError as e:
        raise to_http_exception(e)

@router.get("/{tournament_id}/matches/{match_id}", response_model=match_schemas.MatchRead)
async def get_match_details_endpoint(
    tournament_id: int,
    match_id: int,
    service: MatchService = Depends(get_match_service),
):
    try:
        return service.get_match(match_id, tournament_id=tournament_id)
    except TournamentError as e:
        raise to_http_exception(e)

@router.patch("/{tournament_id}/matches/{match_id}/result", response_model=match_schemas.MatchRead)
async def set_match_result_endpoint(
    tournament_id: int,
    match_id: int,
    result_in: match_schemas.MatchResultUpdate,
    service: MatchService = Depends(get_match_service),
):
    try:
        return service.set_match_result(
            match_id,
            result=result_in.result,
            score_a=result_in.score_a,
            score_b=result_in.score_b,
            tournament_id=tournament_id,
        )
    except TournamentError as e:
        raise to_http_exception(e)
