from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from . import db
from .models import Preference


class PreferenceStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class PreferenceRepo:
    def __init__(self, session: AsyncSession) -> None:
        self.s = session

    async def get(self, scope: str, key: str) -> Optional[str]:
        q = select(Preference).where(Preference.scope == scope, Preference.key == key)
        row = (await self.s.execute(q)).scalars().first()
        return row.value if row else None

    async def set(self, scope: str, key: str, value: str) -> None:
        q = select(Preference).where(Preference.scope == scope, Preference.key == key)
        row = (await self.s.execute(q)).scalars().first()
        if row is None:
            self.s.add(Preference(scope=scope, key=key, value=value))
        else:
            row.value = value
            row.updated_at = datetime.utcnow()


class SqlPreferenceStore:
    """Preferences kept in the SQL database, one namespace per visitor scope."""

    def __init__(self, scope: str = "default") -> None:
        self.scope = scope

    async def get(self, key: str) -> Optional[str]:
        assert db.SessionLocal is not None, "Sessionmaker not initialized"
        async with db.SessionLocal() as s:
            return await PreferenceRepo(s).get(self.scope, key)

    async def set(self, key: str, value: str) -> None:
        assert db.SessionLocal is not None, "Sessionmaker not initialized"
        async with db.SessionLocal() as s:
            await PreferenceRepo(s).set(self.scope, key, value)
            await s.commit()


class MemoryPreferenceStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
