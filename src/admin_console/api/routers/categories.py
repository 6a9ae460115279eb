"""
admin_console.api.routers.categories

Category tree endpoints.

Responsibilities:
- Read the tree (any admin) and mutate it (super_admin / content_admin).
- Expose reorder / move / normalize; a failed reorder answers 409 with the
  reloaded canonical tree and a single message.
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
from admin_console.services.categories import CategoryService
from admin_console.stores.categories import CategoryStore

router = APIRouter(prefix="/v1/categories", tags=["categories"])

_editors = require_admin("super_admin", "content_admin")


def category_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
    client: RetryingDataClient = Depends(get_data_client),
) -> CategoryService:
    return CategoryService(store=CategoryStore(session_factory), client=client)


class CategoryOut(NodeOut):
    children: list[NodeOut] = Field(default_factory=list)


class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    description: str | None = None
    parent_id: str | None = None


class CategoryUpdateRequest(BaseModel):
    # sort_order is rejected here: ordering only changes through /order.
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=256)
    description: str | None = None


def _reorder_response(svc: CategoryService, ok: bool) -> ReorderResponse | JSONResponse:
    body = ReorderResponse(
        ok=ok,
        message=None if ok else svc.reorderer.last_error,
        nodes=[NodeOut.from_node(n) for n in svc.view.nodes],
    )
    if ok:
        return body
    return JSONResponse(status_code=HTTP_409_CONFLICT, content=body.model_dump())


@router.get("", response_model=list[CategoryOut], dependencies=[Depends(require_admin())])
async def list_categories(svc: CategoryService = Depends(category_service)) -> list[CategoryOut]:
    return [
        CategoryOut(
            **NodeOut.from_node(top).model_dump(),
            children=[NodeOut.from_node(c) for c in children],
        )
        for top, children in await svc.tree()
    ]


@router.get("/{node_id}", response_model=NodeOut, dependencies=[Depends(require_admin())])
async def get_category(node_id: str, svc: CategoryService = Depends(category_service)) -> NodeOut:
    node = await svc.get(node_id)
    if node is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Category not found")
    return NodeOut.from_node(node)


@router.post("", response_model=NodeOut, status_code=201, dependencies=[Depends(_editors)])
async def create_category(
    body: CategoryCreateRequest,
    svc: CategoryService = Depends(category_service),
) -> NodeOut:
    node = await svc.create(name=body.name, description=body.description, parent_id=body.parent_id)
    return NodeOut.from_node(node)


@router.patch("/{node_id}", response_model=NodeOut, dependencies=[Depends(_editors)])
async def update_category(
    node_id: str,
    body: CategoryUpdateRequest,
    svc: CategoryService = Depends(category_service),
) -> NodeOut:
    node = await svc.update(node_id, name=body.name, description=body.description)
    return NodeOut.from_node(node)


@router.delete("/{node_id}", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def delete_category(node_id: str, svc: CategoryService = Depends(category_service)):
    ok = await svc.delete(node_id)
    return _reorder_response(svc, ok)


@router.put("/order", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def reorder_categories(
    body: ReorderRequest,
    svc: CategoryService = Depends(category_service),
):
    try:
        ok = await svc.reorder(body.arrangement())
    except ValueError as e:
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail=str(e)) from e
    if ok:
        # The request only carries ids; reload display fields for the response.
        await svc.refresh()
    return _reorder_response(svc, ok)


@router.post("/{node_id}/move", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def move_category(
    node_id: str,
    body: MoveRequest,
    svc: CategoryService = Depends(category_service),
):
    await svc.refresh()
    if node_id not in svc.view.ids:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Category not found")
    ok = await svc.move(node_id, body.to_index)
    return _reorder_response(svc, ok)


@router.post("/normalize", response_model=ReorderResponse, dependencies=[Depends(_editors)])
async def normalize_categories(svc: CategoryService = Depends(category_service)):
    ok = await svc.normalize()
    return _reorder_response(svc, ok)


# --- Module Notes -----------------------------------------------------------
# Route order matters: `/order` and `/normalize` are declared with methods that do not
# collide with `/{node_id}` (PUT/POST vs GET/PATCH/DELETE).
