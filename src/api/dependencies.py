"""FastAPI dependency injection helpers."""

from typing import Optional

from src.infrastructure.realtime import get_realtime
from src.infrastructure.store import RealtimeStore


def get_store() -> Optional[RealtimeStore]:
    """Process-wide realtime store; ``None`` when it never initialised."""
    return get_realtime()
