from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./tournament.db"
    SQL_ECHO: bool = False

    # Cohorts up to this size get a full round-robin schedule, larger ones are paired Swiss-style
    ROUND_ROBIN_MAX_PARTICIPANTS: int = 10
    MIN_PARTICIPANTS: int = 2
    PAIRING_SEED: Optional[int] = None # None -> unseeded side assignment

    DEFAULT_TIME_GAME: int = 10 # minutes, informational only
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
