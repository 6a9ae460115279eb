"""
admin_console.api.routers.tools

Tool list endpoints.

Responsibilities:
- Read the list (any admin) and mutate it (super_admin / content_admin).
- Expose reorder / move / normalize over a flat list; nested items are rejected.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.status import HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from admin_console.api.deps import HTTP_422_UNPROCESSABLE, sessionmaker_from_app
from admin_console.api.schemas import MoveRequest, NodeOut, ReorderRequest, ReorderResponse
from admin_console.auth.deps import get_data_client, require_admin
from admin_console.data.retry import RetryingDataClient
from admin_console.services.tools import ToolService
from admin_console.stores.tools import ToolStore

router = APIRouter(prefix="/v1/tools", tags=["tools"])

_editors = require_admin("super_admin", "content_admin")


def tool_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
    client: RetryingDataClient = Depends(get_data_client),
) -> ToolService:
    return ToolService(store=ToolStore(session_factory), client=client)


class ToolCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    image_url: str | None = Field(default=None, max_length=1024)
    website_link: str | None = Field(default=None, max_length=1024)


class ToolUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=256)
    image_url: str | None = Field(default=None, max_length=1024)
    website_link: str | None = Field(default=None, max_length=1024)


def _reorder_response(svc: ToolService, ok: bool) -> ReorderResponse | JSONResponse:
    body = ReorderResponse(
        ok=ok,
        message=None if ok else svc.reorderer.last_error,
        nodes=[NodeOut.from_node(n) for n in svc.view.nodes],
    )
    if ok:
        return body
    return JSONResponse(status_code=HTTP_409_CONFLICT, content=body.model_dump())


@router.get("", response_model=list[NodeOut], dependencies=[Depends(require_admin())])
async def list_tools(svc: ToolService = Depends(tool_service)) -> list[NodeOut]:
    return [NodeOut.from_node(t) for t in await svc.list_ordered()]


@router.get("/{tool_id}", response_model=NodeOut, dependencies=[Depends(require_admin())])
async def get_tool(tool_id: str, svc: ToolService = Depends(tool_service)) -> NodeOut:
    tool = await svc.get(tool_id)
    if tool is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Tool not found")
    return NodeOut.from_node(tool)


@router.post("", response_model=NodeOut, status_code=201, dependencies=[Depends(_editors)])
async def create_tool(body: ToolCreateRequest, svc: ToolService = Depends(tool_service)) -> NodeOut:
    tool = await svc.create(
        name=body.name, image_url=body.image_url, website_link=body.website_link
    )
    return NodeOut.from_node(tool)


@router.patch("/{tool_id}", response_model=NodeOut, dependencies=[Depends(_editors)])
async def update_tool(
    tool_id: str,
    body: ToolUpdateRequest,
    svc: ToolService = Depends(tool_service),
) -> NodeOut:
    tool = await svc.update(
        tool_id, name=body.name, image_url=body.image_url, website_link=body.website_link
    )
    return NodeOut.from_node(tool)


@router.delete("/{tool_id}", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def delete_tool(tool_id: str, svc: ToolService = Depends(tool_service)):
    ok = await svc.delete(tool_id)
    return _reorder_response(svc, ok)


@router.put("/order", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def reorder_tools(body: ReorderRequest, svc: ToolService = Depends(tool_service)):
    if any(item.parent_id is not None for item in body.nodes):
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail="Tools are flat")
    try:
        ok = await svc.reorder(body.arrangement())
    except ValueError as e:
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail=str(e)) from e
    if ok:
        await svc.list_ordered()
    return _reorder_response(svc, ok)


@router.post("/{tool_id}/move", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def move_tool(tool_id: str, body: MoveRequest, svc: ToolService = Depends(tool_service)):
    await svc.list_ordered()
    if tool_id not in svc.view.ids:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Tool not found")
    ok = await svc.move(tool_id, body.to_index)
    return _reorder_response(svc, ok)


@router.post("/normalize", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def normalize_tools(svc: ToolService = Depends(tool_service)):
    ok = await svc.normalize()
    return _reorder_response(svc, ok)


# --- Module Notes -----------------------------------------------------------
# Same shape as the category routes, minus the tree: `/order` bodies carry no parent_id.
