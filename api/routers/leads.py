"""
Leads API Endpoints.

Endpoints for lead intake, listing, status changes, duplicate checks, score
recalculation, first contact and SLA status.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query

from api.models import (
    ContactResponse,
    DuplicateCheckResponse,
    ErrorResponse,
    LeadCreateRequest,
    LeadCreateResponse,
    LeadResponse,
    LeadStatusUpdateRequest,
    RescoreResponse,
    SlaEvaluationResponse,
    SlaStatusReportResponse,
)
from domain.lead import InvalidStatusTransitionError, LeadAlreadyContactedError, LeadStatus
from domain.sla import classify_lead_sla
from domain.time import utc_now
from services.lead_service import (
    LeadNotFoundError,
    NewLead,
    check_duplicate,
    create_lead,
    get_duplicate_leads,
    get_lead,
    get_leads,
    mark_lead_contacted,
    update_status,
)
from services.scoring_service import recalculate_scores
from services.sla_service import get_sla_status_report

logger = logging.getLogger(__name__)

router = APIRouter()

# Static paths are declared before /leads/{lead_id} so they are matched first.


@router.post(
    "/leads",
    response_model=LeadCreateResponse,
    status_code=201,
    summary="Create Lead",
    description="Create a lead. Scores it, checks for phone duplicates and assigns an SLA deadline."
)
def post_lead(request: LeadCreateRequest):
    """
    Create a lead from a form or API submission.

    **How it works:**
    1. Scores the lead (source, service type, priority, service area)
    2. Flags it as a duplicate if an earlier lead has the same phone number
    3. Assigns the SLA response deadline from the lead priority
    """
    try:
        lead = create_lead(NewLead(**request.model_dump()))
        return LeadCreateResponse(
            **LeadResponse.from_lead(lead).model_dump(),
            was_duplicate_detected=lead.is_duplicate,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to create lead")
        raise HTTPException(status_code=500, detail=f"Failed to create lead: {str(e)}")


@router.get(
    "/leads",
    response_model=List[LeadResponse],
    summary="List Leads",
    description="List leads, newest first. Optionally filter by status."
)
def get_leads_list(
    status: Optional[LeadStatus] = Query(None, description="Only leads with this status"),
):
    try:
        return [LeadResponse.from_lead(lead) for lead in get_leads(status)]
    except Exception as e:
        logger.exception("Failed to list leads")
        raise HTTPException(status_code=500, detail=f"Failed to list leads: {str(e)}")


@router.get(
    "/leads/check-duplicate",
    response_model=DuplicateCheckResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Check Duplicate",
    description="Check whether a phone number already belongs to a lead."
)
def get_duplicate_check(
    phone: Optional[str] = Query(None, description="Customer phone number"),
):
    if not phone:
        raise HTTPException(status_code=400, detail="Phone number required")

    try:
        result = check_duplicate(phone)
        return DuplicateCheckResponse(
            is_duplicate=result.is_duplicate,
            original_lead=LeadResponse.from_lead(result.original_lead) if result.original_lead else None,
            match_count=result.match_count,
        )
    except Exception as e:
        logger.exception("Failed to check for duplicates")
        raise HTTPException(status_code=500, detail=f"Failed to check for duplicates: {str(e)}")


@router.get(
    "/leads/duplicates",
    response_model=List[LeadResponse],
    summary="List Duplicate Leads"
)
def get_duplicates():
    try:
        return [LeadResponse.from_lead(lead) for lead in get_duplicate_leads()]
    except Exception as e:
        logger.exception("Failed to fetch duplicates")
        raise HTTPException(status_code=500, detail=f"Failed to fetch duplicates: {str(e)}")


@router.get(
    "/leads/sla-status",
    response_model=SlaStatusReportResponse,
    summary="SLA Status Report",
    description="SLA state (ok, warning, breached, contacted, no_sla) for every lead."
)
def get_sla_status():
    """
    Evaluate every lead against its SLA deadline.

    Dashboards poll this endpoint (about every 10 seconds); each call is
    evaluated at a single instant.
    """
    try:
        report = get_sla_status_report()
        return SlaStatusReportResponse(
            evaluated_at=report.evaluated_at,
            counts=report.counts(),
            leads=[
                SlaEvaluationResponse.build(
                    item.lead_id, item.evaluation, item.sla_deadline, item.contacted_at
                )
                for item in report.leads
            ],
        )
    except Exception as e:
        logger.exception("Failed to fetch SLA status")
        raise HTTPException(status_code=500, detail=f"Failed to fetch SLA status: {str(e)}")


@router.post(
    "/leads/recalculate-scores",
    response_model=RescoreResponse,
    summary="Recalculate Lead Scores"
)
def post_recalculate_scores():
    try:
        result = recalculate_scores()
        return RescoreResponse(
            message="Scores recalculated",
            total=result.total,
            updated=result.updated,
        )
    except Exception as e:
        logger.exception("Failed to recalculate scores")
        raise HTTPException(status_code=500, detail=f"Failed to recalculate scores: {str(e)}")


@router.get(
    "/leads/{lead_id}",
    response_model=LeadResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get Lead"
)
def get_lead_detail(lead_id: UUID):
    try:
        return LeadResponse.from_lead(get_lead(lead_id))
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail="Lead not found")
    except Exception as e:
        logger.exception("Failed to fetch lead %s", lead_id)
        raise HTTPException(status_code=500, detail=f"Failed to fetch lead: {str(e)}")


@router.patch(
    "/leads/{lead_id}",
    response_model=LeadResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Update Lead Status",
    description="Change a lead's status and optionally its assignee. Terminal leads cannot change status."
)
def patch_lead(lead_id: UUID, request: LeadStatusUpdateRequest):
    try:
        lead = update_status(lead_id, request.status, assigned_to=request.assigned_to)
        return LeadResponse.from_lead(lead)
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail="Lead not found")
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception("Failed to update status for lead %s", lead_id)
        raise HTTPException(status_code=500, detail=f"Failed to update lead status: {str(e)}")


@router.get(
    "/leads/{lead_id}/sla",
    response_model=SlaEvaluationResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get Lead SLA"
)
def get_lead_sla(lead_id: UUID):
    try:
        lead = get_lead(lead_id)
        return SlaEvaluationResponse.build(
            lead.lead_id,
            classify_lead_sla(lead, utc_now()),
            lead.sla_deadline,
            lead.contacted_at,
        )
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail="Lead not found")
    except Exception as e:
        logger.exception("Failed to evaluate SLA for lead %s", lead_id)
        raise HTTPException(status_code=500, detail=f"Failed to evaluate SLA: {str(e)}")


@router.post(
    "/leads/{lead_id}/contact",
    response_model=ContactResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Mark Lead Contacted",
    description="Record first contact with a lead. Freezes its SLA state and reports the response time."
)
def post_lead_contact(lead_id: UUID):
    try:
        result = mark_lead_contacted(lead_id)
        return ContactResponse(
            lead=LeadResponse.from_lead(result.lead),
            sla_breached=result.sla_breached,
            response_time_minutes=result.response_time_minutes,
        )
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail="Lead not found")
    except LeadAlreadyContactedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception("Failed to mark lead %s as contacted", lead_id)
        raise HTTPException(status_code=500, detail=f"Failed to mark lead as contacted: {str(e)}")
