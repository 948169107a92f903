"""
Path-addressed realtime store contract.

Paths are ``"collection"`` or ``"collection/key"``.  Backends implement the
six primitives below; everything domain-specific lives in the
repositories.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class RealtimeStore(Protocol):
    async def get(self, path: str) -> Optional[Any]:
        """Value at *path*, or ``None`` if nothing is stored there."""
        ...

    async def exists(self, path: str) -> bool: ...

    async def set(self, path: str, value: Any) -> None:
        """Overwrite *path* with *value*."""
        ...

    async def update(self, path: str, values: dict[str, Any]) -> None:
        """Merge *values* into the record at *path*, creating it if absent."""
        ...

    async def remove(self, path: str) -> None: ...

    async def query_equal(
        self, path: str, field: str, value: Any
    ) -> dict[str, Any]:
        """Children of *path* whose *field* equals *value*, keyed by id."""
        ...


def join_path(*segments: Any) -> str:
    """Join path segments with ``/``; empty segments are rejected."""
    parts = [str(s).strip("/") for s in segments]
    if not parts or any(not p for p in parts):
        raise ValueError(f"Invalid store path segments: {segments!r}")
    return "/".join(parts)


def split_path(path: str) -> tuple[str, Optional[str]]:
    """``"a/b"`` -> ``("a", "b")``; ``"a"`` -> ``("a", None)``."""
    parts = path.strip("/").split("/")
    if len(parts) == 1 and parts[0]:
        return parts[0], None
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1]
    raise ValueError(f"Unsupported store path: {path!r}")


def filter_children(
    children: Optional[Mapping[str, Any]], field: str, value: Any
) -> dict[str, Any]:
    """Client-side equality filter over a ``{id: record}`` snapshot."""
    return {
        child_id: record
        for child_id, record in (children or {}).items()
        if isinstance(record, dict) and record.get(field) == value
    }
