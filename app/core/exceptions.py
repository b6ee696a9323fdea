"""Error taxonomy of the tournament engine.

Services raise these and never build HTTP responses themselves; the routers
translate each kind into a status code. Every error carries a readable
``message`` and a stable ``kind`` so callers can tell "fix your input" from
"fix the tournament state" from "not found".
"""


class TournamentError(Exception):
    """Base exception for all tournament engine errors."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(TournamentError):
    """Malformed input: missing name, bad score combination, bad result tag..."""

    kind = "validation"


class PreconditionError(TournamentError):
    """A business rule gate failed (round incomplete, not enough participants...)."""

    kind = "precondition"


class ConflictError(TournamentError):
    """Something already exists: duplicate join, unique violation, concurrent round."""

    kind = "conflict"


class NotFoundError(TournamentError):
    """Referenced tournament, match or participant does not exist."""

    kind = "not_found"


class PersistenceError(TournamentError):
    """Unexpected failure from the storage layer."""

    kind = "persistence"
