from datetime import datetime, timezone


def get_now_utc() -> datetime:
    """Get current datetime in UTC"""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Current time as epoch milliseconds (the format of `responsesUpdatedAt`)."""
    return int(get_now_utc().timestamp() * 1000)

