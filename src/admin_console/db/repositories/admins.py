from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from admin_console.auth.models import AdminRole
from admin_console.db.models import Admin


class AdminRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, admin_id: str) -> Admin | None:
        return await self._session.get(Admin, admin_id)

    async def role_of(self, admin_id: str) -> AdminRole | None:
        stmt = select(Admin.role).where(Admin.id == admin_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        id: str,
        email: str,
        role: AdminRole,
        first_name: str = "",
        last_name: str = "",
        created_by: str | None = None,
    ) -> Admin:
        admin = Admin(
            id=id,
            email=email,
            role=role,
            first_name=first_name,
            last_name=last_name,
            created_by=created_by,
        )
        self._session.add(admin)
        await self._session.flush()
        return admin
