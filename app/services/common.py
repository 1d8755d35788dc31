"""Helper condivisi dai service: validazione id e serializzazione delle risposte."""

from typing import Any

from app.schemas.players import RadarAxisOut

INVALID_ID_ERROR = "invalid id"


def validate_entity_id(value: Any) -> int | None:
    """Id intero positivo, altrimenti None. Nessuna query prima di questo controllo."""
    if value is None or isinstance(value, bool):
        return None
    try:
        entity_id = int(str(value).strip())
    except (ValueError, TypeError):
        return None
    return entity_id if entity_id > 0 else None


def round_value(value: Any, digits: int = 4) -> Any:
    if isinstance(value, float):
        return round(value, digits)
    return value


def rounded(d: dict[str, Any]) -> dict[str, Any]:
    return {k: round_value(v) for k, v in d.items()}


def radar_out(radar: list[dict[str, Any]]) -> list[RadarAxisOut]:
    return [
        RadarAxisOut(
            key=a["key"],
            label=a["label"],
            value=round_value(a["value"]),
            percentile=a["percentile"],
            inverted=a["inverted"],
        )
        for a in radar
    ]
