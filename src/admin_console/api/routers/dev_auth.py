from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.status import HTTP_404_NOT_FOUND

from admin_console.api.deps import sessionmaker_from_app, settings_dep
from admin_console.auth.jwt import JwtConfig, issue_token
from admin_console.auth.models import AdminRole
from admin_console.db.init_db import seed_admin
from admin_console.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=64)
    email: str = Field(default="", max_length=256)
    # Registers the subject in the admin directory (dev convenience).
    admin_role: AdminRole | None = None
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    if body.admin_role is not None:
        await seed_admin(
            session_factory, identity_id=body.subject, email=body.email, role=body.admin_role
        )

    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=body.subject,
        email=body.email,
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)
