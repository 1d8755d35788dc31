"""Virtual Football Stats: API metriche giocatori e squadre (radar percentile, classifiche)."""

import logging

from fastapi import FastAPI

from app.core.database import init_db
from app.routers import health_router, leaderboards_router, players_router, teams_router

app = FastAPI(
    title="Virtual Football Stats",
    description="Player and team performance metrics for a virtual football league: "
    "aggregated stats, cluster percentile radars, leaderboards.",
    version="0.1.0",
)

app.include_router(health_router)
app.include_router(players_router)
app.include_router(teams_router)
app.include_router(leaderboards_router)


@app.on_event("startup")
def on_startup():
    """Logging e tabelle mancanti all'avvio."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    init_db()
