"""
Firebase Realtime Database backend.

``firebase_admin.db`` is a blocking SDK, so every call is pushed onto a
worker thread with ``asyncio.to_thread`` to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, db, exceptions

from .store import filter_children

logger = logging.getLogger(__name__)


def normalize_private_key(private_key: Optional[str]) -> Optional[str]:
    """Turn ``\\n`` escapes from .env files into real newlines."""
    if not private_key:
        return private_key
    return private_key.replace("\\n", "\n")


def initialize_firebase_app(
    project_id: str, client_email: str, private_key: str, database_url: str
) -> firebase_admin.App:
    """Initialise (or reuse) the default firebase_admin app."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        cred = credentials.Certificate(
            {
                "type": "service_account",
                "project_id": project_id,
                "client_email": client_email,
                "private_key": normalize_private_key(private_key),
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        )
        return firebase_admin.initialize_app(
            cred, {"databaseURL": database_url}
        )


class FirebaseRealtimeStore:
    def __init__(self, app: Optional[firebase_admin.App] = None):
        self.app = app

    def _ref(self, path: str) -> db.Reference:
        return db.reference(path, app=self.app)

    async def get(self, path: str) -> Optional[Any]:
        return await asyncio.to_thread(self._ref(path).get)

    async def exists(self, path: str) -> bool:
        value = await asyncio.to_thread(self._ref(path).get, shallow=True)
        return value is not None

    async def set(self, path: str, value: Any) -> None:
        await asyncio.to_thread(self._ref(path).set, value)

    async def update(self, path: str, values: dict[str, Any]) -> None:
        await asyncio.to_thread(self._ref(path).update, values)

    async def remove(self, path: str) -> None:
        await asyncio.to_thread(self._ref(path).delete)

    async def query_equal(
        self, path: str, field: str, value: Any
    ) -> dict[str, Any]:
        """Server-side equality query; filtered locally when the path has
        no ``.indexOn`` rule for *field*."""
        query = self._ref(path).order_by_child(field).equal_to(value)
        try:
            result = await asyncio.to_thread(query.get)
        except exceptions.FirebaseError as exc:
            logger.warning(
                "Indexed query on %s by %s failed (%s); filtering locally",
                path,
                field,
                exc,
            )
            children = await self.get(path)
            return filter_children(
                children if isinstance(children, dict) else None, field, value
            )
        return dict(result or {})
