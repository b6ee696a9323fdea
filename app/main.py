from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.endpoints import tournaments as tournament_endpoints
from app.api.endpoints import matches as match_endpoints
from app.core.config import settings
from app.core.database import init_db
from app.core.log_config import configure_logging

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Chess Tournament API", lifespan=lifespan)

# Include routers
app.include_router(tournament_endpoints.router, prefix="/tournaments", tags=["Tournaments"])
app.include_router(match_endpoints.router, prefix="/tournaments", tags=["Matches"])


@app.get("/")
async def read_root():
    return {"message": "Chess Tournament API"}
