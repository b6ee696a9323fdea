from fastapi import HTTPException, status

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    PreconditionError,
    TournamentError,
    ValidationError,
)

STATUS_BY_ERROR = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PreconditionError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

def to_http_exception(error: TournamentError) -> HTTPException:
    status_code = STATUS_BY_ERROR.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=error.to_detail())
