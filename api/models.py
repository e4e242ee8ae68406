"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.lead import Lead, LeadPriority, LeadStatus
from domain.lead_score import ScoreTier
from domain.sla import SlaEvaluation, SlaStatus
from domain.tax import EmploymentType, FilingStatus


# ============================================================================
# Lead Models
# ============================================================================

class LeadCreateRequest(BaseModel):
    """Request to create a lead."""
    source: str = Field(..., min_length=1, description="Lead source (e.g., 'eLocal', 'Direct')")
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    priority: LeadPriority = LeadPriority.NORMAL
    status: LeadStatus = LeadStatus.NEW
    customer_email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    service_type: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "source": "eLocal",
                "customer_name": "Jane Doe",
                "customer_phone": "3125550100",
                "priority": "high",
                "zip_code": "60614",
                "service_type": "Sewer Main - Repair"
            }
        }
    )


class LeadStatusUpdateRequest(BaseModel):
    """Request to change a lead's status (and optionally who it is assigned to)."""
    status: LeadStatus
    assigned_to: Optional[str] = None


class LeadResponse(BaseModel):
    """Single lead in API response."""
    lead_id: UUID
    source: str
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    service_type: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    status: LeadStatus
    priority: LeadPriority
    created_at: datetime
    sla_deadline: Optional[datetime] = None
    contacted_at: Optional[datetime] = None
    sla_breach: bool
    lead_score: int
    score_tier: ScoreTier
    is_duplicate: bool
    duplicate_of_id: Optional[UUID] = None

    @classmethod
    def from_lead(cls, lead: Lead) -> "LeadResponse":
        return cls(
            lead_id=lead.lead_id,
            source=lead.source,
            customer_name=lead.customer_name,
            customer_phone=lead.customer_phone,
            customer_email=lead.customer_email,
            address=lead.address,
            city=lead.city,
            zip_code=lead.zip_code,
            service_type=lead.service_type,
            description=lead.description,
            assigned_to=lead.assigned_to,
            status=lead.status,
            priority=lead.priority,
            created_at=lead.created_at,
            sla_deadline=lead.sla_deadline,
            contacted_at=lead.contacted_at,
            sla_breach=lead.sla_breach,
            lead_score=lead.lead_score,
            score_tier=ScoreTier.for_score(lead.lead_score),
            is_duplicate=lead.is_duplicate,
            duplicate_of_id=lead.duplicate_of_id,
        )


class LeadCreateResponse(LeadResponse):
    """Created lead plus whether ingestion flagged it as a duplicate."""
    was_duplicate_detected: bool


class DuplicateCheckResponse(BaseModel):
    """Response for a duplicate phone-number check."""
    is_duplicate: bool
    original_lead: Optional[LeadResponse] = None
    match_count: int


class ContactResponse(BaseModel):
    """Response after marking a lead as contacted."""
    lead: LeadResponse
    sla_breached: bool
    response_time_minutes: int


class RescoreResponse(BaseModel):
    """Response after batch score recalculation."""
    message: str
    total: int
    updated: int


# ============================================================================
# SLA Models
# ============================================================================

class SlaEvaluationResponse(BaseModel):
    """SLA state for a single lead."""
    lead_id: UUID
    status: SlaStatus
    remaining_minutes: Optional[int] = None
    label: str
    sla_deadline: Optional[datetime] = None
    contacted_at: Optional[datetime] = None

    @classmethod
    def build(
        cls,
        lead_id: UUID,
        evaluation: SlaEvaluation,
        sla_deadline: Optional[datetime],
        contacted_at: Optional[datetime],
    ) -> "SlaEvaluationResponse":
        return cls(
            lead_id=lead_id,
            status=evaluation.status,
            remaining_minutes=evaluation.remaining_minutes,
            label=evaluation.label,
            sla_deadline=sla_deadline,
            contacted_at=contacted_at,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "lead_id": "123e4567-e89b-12d3-a456-426614174000",
                "status": "warning",
                "remaining_minutes": 4,
                "label": "4m",
                "sla_deadline": "2025-01-01T12:30:00Z",
                "contacted_at": None
            }
        }
    )


class SlaStatusReportResponse(BaseModel):
    """SLA state for every lead, evaluated at one instant."""
    evaluated_at: datetime
    counts: Dict[SlaStatus, int]
    leads: List[SlaEvaluationResponse]


# ============================================================================
# Payroll Tax Models
# ============================================================================

class TaxCalculationRequest(BaseModel):
    """Request to calculate withholding for one pay period."""
    gross_pay: Decimal = Field(..., gt=0, description="Gross pay for the period")
    employment_type: EmploymentType
    residence_state: str = Field(..., min_length=2, max_length=2)
    filing_status: FilingStatus = FilingStatus.SINGLE
    ytd_gross_wages: Decimal = Field(Decimal("0"), ge=0)
    allowances: int = Field(1, ge=0)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "gross_pay": "1000.00",
                "employment_type": "salary",
                "residence_state": "IL",
                "filing_status": "single",
                "ytd_gross_wages": "0",
                "allowances": 1
            }
        }
    )


class TaxCalculationResponse(BaseModel):
    """Withholding breakdown for one pay period."""
    federal_tax: Decimal
    state_tax: Decimal
    social_security: Decimal
    medicare: Decimal
    total_tax: Decimal
    net_pay: Decimal
    effective_rate: Decimal
    is_1099: bool
    self_employment_tax: Optional[Decimal] = None


class StateTaxRateResponse(BaseModel):
    code: str
    name: str
    rate: Decimal


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Not found",
                "detail": "Lead not found",
                "status_code": 404
            }
        }
    )
