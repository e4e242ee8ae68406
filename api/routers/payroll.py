"""
Payroll API Endpoints.

Endpoints for per-period tax withholding calculation.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from api.models import StateTaxRateResponse, TaxCalculationRequest, TaxCalculationResponse
from domain.tax import available_states, calculate_taxes

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/payroll/taxes",
    response_model=TaxCalculationResponse,
    summary="Calculate Payroll Taxes",
    description="Calculate weekly withholding for a W2 employee, or the self-employment estimate for a 1099 contractor."
)
def post_tax_calculation(request: TaxCalculationRequest):
    """
    Calculate taxes for one pay period.

    - `hourly` workers are 1099 contractors: nothing is withheld.
    - Unknown `residence_state` codes use the Illinois rate.
    - `head_of_household` uses the single-filer brackets.

    **Example request:**
    ```json
    {
      "gross_pay": "1000.00",
      "employment_type": "salary",
      "residence_state": "IL",
      "filing_status": "single"
    }
    ```
    """
    try:
        result = calculate_taxes(
            gross_pay=request.gross_pay,
            employment_type=request.employment_type,
            residence_state=request.residence_state,
            filing_status=request.filing_status,
            ytd_gross_wages=request.ytd_gross_wages,
            allowances=request.allowances,
        )
    except Exception as e:
        logger.exception("Failed to calculate taxes")
        raise HTTPException(status_code=500, detail=f"Failed to calculate taxes: {str(e)}")

    return TaxCalculationResponse(
        federal_tax=result.federal_tax,
        state_tax=result.state_tax,
        social_security=result.social_security,
        medicare=result.medicare,
        total_tax=result.total_tax,
        net_pay=result.net_pay,
        effective_rate=result.effective_rate,
        is_1099=result.is_1099,
        self_employment_tax=result.self_employment_tax,
    )


@router.get(
    "/payroll/tax-states",
    response_model=List[StateTaxRateResponse],
    summary="List Supported States"
)
def get_tax_states():
    return [
        StateTaxRateResponse(code=state.code, name=state.name, rate=state.rate)
        for state in available_states()
    ]
