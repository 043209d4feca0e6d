"""
Vendor lead routes.

Usage:
    1. GET   /api/vendor-leads/{vendor_id}?status=&priority=&q=  - Filtered pipeline
    2. POST  /api/vendor-leads/{vendor_id}                       - Add a manual lead
    3. GET   /api/vendor-leads/{vendor_id}/analytics             - Pipeline breakdown
    4. GET   /api/vendor-leads/{vendor_id}/{lead_id}             - Lead with activity log
    5. PATCH /api/vendor-leads/{vendor_id}/{lead_id}             - Status / priority / notes
    6. POST  /api/vendor-leads/{vendor_id}/{lead_id}/activity    - Append an activity note
    7. GET   /api/vendor-tools/lead-inbox/{vendor_id}            - Threads and pending requests
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from viah.auth.access import ensure_vendor_access
from viah.auth.verify import auth_dependency
from viah.features.leads.domain import ActivityCreate, LeadActivity, LeadCreate, LeadUpdate, VendorLead
from viah.features.leads.inbox import build_lead_inbox
from viah.features.leads.service import (
    LeadNotFoundError,
    add_activity,
    create_manual_lead,
    get_analytics,
    get_lead,
    list_leads,
    update_lead,
)
from viah.features.messaging.domain import Conversation

router = APIRouter(prefix="/api/vendor-leads", tags=["leads"])
inbox_router = APIRouter(prefix="/api/vendor-tools", tags=["leads"])


def _lead_not_found(e: LeadNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{vendor_id}", response_model=list[VendorLead])
async def get_leads(
    vendor_id: str,
    status_filter: str | None = Query(default=None, alias="status"),
    priority: str | None = None,
    q: str | None = None,
    claims: dict = Depends(auth_dependency),
):
    await ensure_vendor_access(claims, vendor_id)
    return await list_leads(vendor_id, status=status_filter, priority=priority, query=q)


@router.post("/{vendor_id}", response_model=VendorLead, status_code=status.HTTP_201_CREATED)
async def post_lead(vendor_id: str, payload: LeadCreate, claims: dict = Depends(auth_dependency)):
    await ensure_vendor_access(claims, vendor_id)
    return await create_manual_lead(vendor_id, payload, claims["sub"])


@router.get("/{vendor_id}/analytics")
async def lead_analytics(vendor_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_vendor_access(claims, vendor_id)
    return await get_analytics(vendor_id)


@router.get("/{vendor_id}/{lead_id}")
async def lead_detail(vendor_id: str, lead_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_vendor_access(claims, vendor_id)
    try:
        lead, activities = await get_lead(vendor_id, lead_id)
    except LeadNotFoundError as e:
        raise _lead_not_found(e) from e
    return {"lead": lead, "activities": activities}


@router.patch("/{vendor_id}/{lead_id}", response_model=VendorLead)
async def patch_lead(
    vendor_id: str, lead_id: str, payload: LeadUpdate, claims: dict = Depends(auth_dependency)
):
    await ensure_vendor_access(claims, vendor_id)
    try:
        return await update_lead(vendor_id, lead_id, payload, claims["sub"])
    except LeadNotFoundError as e:
        raise _lead_not_found(e) from e


@router.post(
    "/{vendor_id}/{lead_id}/activity",
    response_model=LeadActivity,
    status_code=status.HTTP_201_CREATED,
)
async def post_activity(
    vendor_id: str, lead_id: str, payload: ActivityCreate, claims: dict = Depends(auth_dependency)
):
    await ensure_vendor_access(claims, vendor_id)
    try:
        return await add_activity(vendor_id, lead_id, payload, claims["sub"])
    except LeadNotFoundError as e:
        raise _lead_not_found(e) from e


@inbox_router.get("/lead-inbox/{vendor_id}", response_model=list[Conversation])
async def lead_inbox(vendor_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_vendor_access(claims, vendor_id)
    return await build_lead_inbox(vendor_id)
