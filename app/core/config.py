"""Application configuration. Load from environment."""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SEASON_MIN = 18
DEFAULT_MIN_SAMPLE_SIZE = 30
DEFAULT_RECENT_ROLE_MATCHES = 30
DEFAULT_TEAM_MIN_MATCHES = 1


def get_database_url() -> str:
    """Return DATABASE_URL from environment. Raises if missing."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is required")
    return url


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def get_season_min() -> int:
    """Primo numero di stagione considerato 'ufficiale'."""
    return _int_env("SEASON_MIN", DEFAULT_SEASON_MIN)


def get_min_sample_size() -> int:
    """Minimo di partite nel cluster per entrare nel pool di confronto."""
    return _int_env("MIN_SAMPLE_SIZE", DEFAULT_MIN_SAMPLE_SIZE)


def get_recent_role_matches() -> int:
    """Numero di partite recenti usate per determinare il ruolo attuale."""
    return _int_env("RECENT_ROLE_MATCHES", DEFAULT_RECENT_ROLE_MATCHES)


def get_team_min_matches() -> int:
    return _int_env("TEAM_MIN_MATCHES", DEFAULT_TEAM_MIN_MATCHES)
