"""
Dashboard widget routes.

Usage:
    1. GET   /api/dashboard/widgets/{wedding_id}  - Widgets in position order (defaults on first load)
    2. PATCH /api/dashboard/widgets/{widget_id}   - Toggle visibility, move, or change config
    3. POST  /api/dashboard/widgets/reorder       - Persist a full or partial order
"""

from fastapi import APIRouter, Depends, HTTPException, status

from viah.auth.access import ensure_wedding_access
from viah.auth.verify import auth_dependency
from viah.features.dashboard.domain import DashboardWidget, WidgetReorderRequest, WidgetUpdate
from viah.features.dashboard.repository import WidgetRepository
from viah.features.dashboard.service import (
    InvalidWidgetOrderError,
    WidgetNotFoundError,
    get_widgets,
    reorder_widgets,
    update_widget,
)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/widgets/{wedding_id}", response_model=list[DashboardWidget])
async def list_widgets(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await get_widgets(wedding_id)


@router.post("/widgets/reorder", response_model=list[DashboardWidget])
async def reorder(payload: WidgetReorderRequest, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, payload.wedding_id)
    try:
        return await reorder_widgets(payload.wedding_id, payload.widget_ids)
    except InvalidWidgetOrderError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": e.code, "message": str(e), **e.details},
        ) from e


@router.patch("/widgets/{widget_id}", response_model=DashboardWidget)
async def patch_widget(
    widget_id: str, payload: WidgetUpdate, claims: dict = Depends(auth_dependency)
):
    widget = await WidgetRepository.get(widget_id)
    if not widget:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Widget not found")
    await ensure_wedding_access(claims, widget.wedding_id)
    try:
        return await update_widget(widget_id, payload)
    except WidgetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
