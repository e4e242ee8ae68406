"""
Domain: Payroll tax calculation (weekly pay periods, 2024 rates).

Rules implemented here:
- HOURLY workers are 1099 contractors: nothing is withheld, net pay equals gross pay,
  and a self-employment tax estimate (15.3% of gross) is reported for information only.
- SALARY workers are W2 employees:
  - Federal income tax: marginal bracket walk over
    adjusted_gross = max(0, gross_pay - allowances * 87.50).
    MARRIED uses the married table; SINGLE and HEAD_OF_HOUSEHOLD use the single table.
  - State income tax: flat rate of the residence state. Unknown state codes fall back
    to Illinois.
  - Social Security: 6.2% of wages up to the annual wage base, net of year-to-date wages.
  - Medicare: 1.45%, uncapped.
- Monetary amounts are rounded half-up to cents, effective_rate to 4 decimal places.
  total_tax is the sum of the rounded components.

This module is pure: no I/O, no clock. Callers validate gross_pay > 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

_CENTS = Decimal("0.01")
_RATE_PLACES = Decimal("0.0001")
_ZERO = Decimal("0")

SOCIAL_SECURITY_RATE = Decimal("0.062")
MEDICARE_RATE = Decimal("0.0145")
SOCIAL_SECURITY_WAGE_BASE = Decimal("168600")
SELF_EMPLOYMENT_TAX_RATE = Decimal("0.153")
ALLOWANCE_AMOUNT = Decimal("87.5")

DEFAULT_STATE = "IL"


class EmploymentType(str, Enum):
    HOURLY = "hourly"  # 1099
    SALARY = "salary"  # W2


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    HEAD_OF_HOUSEHOLD = "head_of_household"


@dataclass(frozen=True, slots=True)
class TaxBracket:
    lower: Decimal
    upper: Optional[Decimal]  # None = unbounded
    rate: Decimal

    def taxable_width(self) -> Optional[Decimal]:
        return None if self.upper is None else self.upper - self.lower


def _brackets(*rows: Tuple[str, Optional[str], str]) -> Tuple[TaxBracket, ...]:
    return tuple(
        TaxBracket(Decimal(lower), None if upper is None else Decimal(upper), Decimal(rate))
        for lower, upper, rate in rows
    )


FEDERAL_BRACKETS_SINGLE = _brackets(
    ("0", "221", "0.10"),
    ("221", "753", "0.12"),
    ("753", "1777", "0.22"),
    ("1777", "3492", "0.24"),
    ("3492", "4399", "0.32"),
    ("4399", "10785", "0.35"),
    ("10785", None, "0.37"),
)

FEDERAL_BRACKETS_MARRIED = _brackets(
    ("0", "442", "0.10"),
    ("442", "1506", "0.12"),
    ("1506", "3554", "0.22"),
    ("3554", "6983", "0.24"),
    ("6983", "8792", "0.32"),
    ("8792", "13317", "0.35"),
    ("13317", None, "0.37"),
)


@dataclass(frozen=True, slots=True)
class StateTaxRate:
    code: str
    name: str
    rate: Decimal

    @property
    def no_income_tax(self) -> bool:
        return self.rate == _ZERO


STATE_TAX_RATES = {
    rate.code: rate
    for rate in (
        StateTaxRate("IL", "Illinois", Decimal("0.0495")),
        StateTaxRate("IN", "Indiana", Decimal("0.0315")),
        StateTaxRate("WI", "Wisconsin", Decimal("0.0765")),  # top marginal rate
        StateTaxRate("MI", "Michigan", Decimal("0.0425")),
        StateTaxRate("OH", "Ohio", Decimal("0.04")),
        StateTaxRate("IA", "Iowa", Decimal("0.06")),
        StateTaxRate("MO", "Missouri", Decimal("0.0495")),
        StateTaxRate("KY", "Kentucky", Decimal("0.04")),
        StateTaxRate("TX", "Texas", _ZERO),
        StateTaxRate("FL", "Florida", _ZERO),
        StateTaxRate("NV", "Nevada", _ZERO),
        StateTaxRate("WA", "Washington", _ZERO),
        StateTaxRate("TN", "Tennessee", _ZERO),
    )
}


@dataclass(frozen=True, slots=True)
class TaxCalculationResult:
    federal_tax: Decimal
    state_tax: Decimal
    social_security: Decimal
    medicare: Decimal
    total_tax: Decimal
    net_pay: Decimal
    effective_rate: Decimal
    is_1099: bool
    self_employment_tax: Optional[Decimal] = None


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def brackets_for(filing_status: FilingStatus) -> Tuple[TaxBracket, ...]:
    if filing_status == FilingStatus.MARRIED:
        return FEDERAL_BRACKETS_MARRIED
    if filing_status == FilingStatus.HEAD_OF_HOUSEHOLD:
        # No head-of-household table exists yet; withholding uses the single table.
        logger.warning("head_of_household filing status uses the single-filer bracket table")
    return FEDERAL_BRACKETS_SINGLE


def federal_income_tax(adjusted_gross: Decimal, brackets: Tuple[TaxBracket, ...]) -> Decimal:
    """Marginal bracket walk; returns the unrounded tax."""

    tax = _ZERO
    remaining = adjusted_gross
    for bracket in brackets:
        if remaining <= 0:
            break
        width = bracket.taxable_width()
        taxable = remaining if width is None else min(remaining, width)
        tax += taxable * bracket.rate
        remaining -= taxable
    return tax


def state_rate_for(residence_state: str) -> StateTaxRate:
    """
    Resolve the flat state rate.

    Unknown codes fall back to Illinois. This masks typos in employee records, so the
    fallback is logged.
    """

    code = residence_state.strip().upper()
    rate = STATE_TAX_RATES.get(code)
    if rate is None:
        logger.warning(
            "Unrecognized residence state %r; falling back to %s rate",
            residence_state,
            DEFAULT_STATE,
        )
        return STATE_TAX_RATES[DEFAULT_STATE]
    return rate


def calculate_taxes(
    gross_pay: Number,
    employment_type: EmploymentType,
    residence_state: str,
    filing_status: FilingStatus,
    ytd_gross_wages: Number = 0,
    allowances: int = 1,
) -> TaxCalculationResult:
    """
    Calculate per-period withholding for a single paycheck.

    Example:
        result = calculate_taxes(1000, EmploymentType.SALARY, "IL", FilingStatus.SINGLE)
        # result.state_tax == Decimal("49.50"), result.federal_tax == Decimal("121.03")
    """

    gross = _to_decimal(gross_pay)

    if employment_type == EmploymentType.HOURLY:
        return TaxCalculationResult(
            federal_tax=_ZERO,
            state_tax=_ZERO,
            social_security=_ZERO,
            medicare=_ZERO,
            total_tax=_ZERO,
            net_pay=gross,
            effective_rate=_ZERO,
            is_1099=True,
            self_employment_tax=_money(gross * SELF_EMPLOYMENT_TAX_RATE),
        )

    adjusted_gross = max(_ZERO, gross - allowances * ALLOWANCE_AMOUNT)
    federal_tax = _money(federal_income_tax(adjusted_gross, brackets_for(filing_status)))

    state = state_rate_for(residence_state)
    state_tax = _ZERO if state.no_income_tax else _money(gross * state.rate)

    remaining_ss_wages = max(_ZERO, SOCIAL_SECURITY_WAGE_BASE - _to_decimal(ytd_gross_wages))
    social_security = _money(min(gross, remaining_ss_wages) * SOCIAL_SECURITY_RATE)

    medicare = _money(gross * MEDICARE_RATE)

    total_tax = federal_tax + state_tax + social_security + medicare
    net_pay = gross - total_tax
    effective_rate = (total_tax / gross).quantize(_RATE_PLACES, rounding=ROUND_HALF_UP) if gross > 0 else _ZERO

    return TaxCalculationResult(
        federal_tax=federal_tax,
        state_tax=state_tax,
        social_security=social_security,
        medicare=medicare,
        total_tax=total_tax,
        net_pay=_money(net_pay),
        effective_rate=effective_rate,
        is_1099=False,
    )


def available_states() -> List[StateTaxRate]:
    """Supported residence states, sorted by name."""

    return sorted(STATE_TAX_RATES.values(), key=lambda rate: rate.name)


__all__ = [
    "EmploymentType",
    "FilingStatus",
    "StateTaxRate",
    "TaxCalculationResult",
    "available_states",
    "calculate_taxes",
    "state_rate_for",
]
