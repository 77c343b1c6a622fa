"""
Lead Routes

POST /leads - Capture an enquiry from the public site
GET /leads - List leads (admin)
PATCH /leads/{lead_id} - Change lead status (admin)
POST /leads/{lead_id}/convert - Push lead to the CRM automation (admin)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from careerhq.core.auth import get_current_admin
from careerhq.core.config import get_settings
from careerhq.core.errors import NotFoundError
from careerhq.db.mongodb import MongoStore, get_store
from careerhq.schemas.schemas import ConvertLeadResponse, LeadCreate, LeadStatusUpdate
from careerhq.services.automation_client import AutomationClient, get_automation_client, normalize_phone
from careerhq.services.mongo_service import LeadService, pagination, serialize_doc
from careerhq.utils.file_upload import read_json_object, validate_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["Leads"])


def get_lead_or_404(service: LeadService, lead_id: str) -> dict:
    lead = service.get_by_id(lead_id)
    if lead is None:
        raise NotFoundError("Lead not found")
    return lead


@router.post("", status_code=201)
async def create_lead(request: Request, store: MongoStore = Depends(get_store)):
    """Store an enquiry. New leads always start with status 'new'."""
    data = await read_json_object(request)
    lead = validate_payload(LeadCreate, data).to_document()
    created = LeadService(store).create(lead)
    logger.info("Lead captured: %s", created["_id"])
    return {"lead": serialize_doc(created)}


@router.get("")
async def list_leads(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = None,
    search: Optional[str] = None,
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    """Newest first, filtered by status and a name/email/program search."""
    leads, total = LeadService(store).list(status=status, search=search, page=page, limit=limit)
    return {"leads": [serialize_doc(lead) for lead in leads], **pagination(page, limit, total)}


@router.patch("/{lead_id}")
async def update_lead_status(
    lead_id: str,
    request: Request,
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    service = LeadService(store)
    lead = get_lead_or_404(service, lead_id)
    update = validate_payload(LeadStatusUpdate, await read_json_object(request))
    return {"lead": serialize_doc(service.set_status(lead, update.status))}


@router.post("/{lead_id}/convert", response_model=ConvertLeadResponse)
async def convert_lead(
    lead_id: str,
    store: MongoStore = Depends(get_store),
    automation: AutomationClient = Depends(get_automation_client),
    admin: dict = Depends(get_current_admin),
):
    """
    Submit the lead's contact details to the automation API, then mark it converted.

    The status is only changed once the automation call succeeded.
    """
    service = LeadService(store)
    lead = get_lead_or_404(service, lead_id)

    automation.submit_contact(
        name=lead["name"],
        email=lead["email"],
        phone=normalize_phone(lead["phone"], get_settings().lead_phone_prefix),
    )
    service.set_status(lead, "converted")
    logger.info("Lead %s converted", lead_id)
    return ConvertLeadResponse(success=True)
