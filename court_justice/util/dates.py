from datetime import datetime, timezone

def to_utc_aware(dt: datetime | None) -> datetime | None:
    # Normaliza a UTC. Si viene naive, ASUMIMOS que es UTC (SQLite no guarda tz).
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)