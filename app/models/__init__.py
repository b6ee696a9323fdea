from app.core.database import Base

# Import all models here to ensure they are registered with Base
from .tournament import Tournament
from .participant import Participant
from .match import Match

__all__ = ["Base", "Tournament", "Participant", "Match"]
