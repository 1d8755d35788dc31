from app.routers.health import router as health_router
from app.routers.leaderboards import router as leaderboards_router
from app.routers.players import router as players_router
from app.routers.teams import router as teams_router

__all__ = ["health_router", "players_router", "teams_router", "leaderboards_router"]
