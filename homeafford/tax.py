"""US income tax calculations: federal brackets, FICA, flat state tax."""

import logging
from dataclasses import dataclass

from homeafford.tax_data import DEFAULT_TABLES, Bracket, PayrollConstants, canonical_state

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Progressive (bracket) tax
# ---------------------------------------------------------------------------


def bracket_tax(income: float, brackets: list[Bracket]) -> float:
    """Tax owed on ``income`` under a contiguous marginal bracket schedule."""
    tax = 0.0
    for bracket in brackets:
        if income > bracket.min:
            tax += (min(income, bracket.max) - bracket.min) * bracket.rate
        if income <= bracket.max:
            break
    return tax


def marginal_rate(income: float, brackets: list[Bracket]) -> float:
    """Return the rate of the bracket the last dollar of income falls in."""
    for bracket in brackets:
        if income <= bracket.max:
            return bracket.rate
    return brackets[-1].rate


def federal_tax(income: float, brackets: list[Bracket] | None = None) -> float:
    if brackets is None:
        brackets = DEFAULT_TABLES.federal_brackets
    return bracket_tax(income, brackets)


# ---------------------------------------------------------------------------
# Payroll tax (Social Security + Medicare)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollTax:
    social_security: float
    medicare: float

    @property
    def total(self) -> float:
        return self.social_security + self.medicare


def payroll_tax(annual_income: float, constants: PayrollConstants | None = None) -> PayrollTax:
    """FICA owed on wages.

    Social Security stops at the wage cap. The additional Medicare tax
    applies only to the part of income above the surcharge threshold.
    """
    if constants is None:
        constants = DEFAULT_TABLES.payroll
    social_security = min(annual_income, constants.wage_cap) * constants.social_security_rate
    medicare = annual_income * constants.medicare_rate
    if annual_income > constants.surcharge_threshold:
        medicare += (annual_income - constants.surcharge_threshold) * constants.surcharge_rate
    return PayrollTax(social_security=social_security, medicare=medicare)


# ---------------------------------------------------------------------------
# State tax
# ---------------------------------------------------------------------------


def state_rate(state: str | None, state_rates: dict[str, float] | None = None) -> float:
    """Flat state income tax rate; 0 for a missing or unknown state."""
    if state_rates is None:
        state_rates = DEFAULT_TABLES.state_rates
    name = canonical_state(state)
    if name is None or name not in state_rates:
        if state:
            logger.warning("No state tax rate for '%s'; using 0", state)
        return 0.0
    return state_rates[name]


def state_tax(income: float, state: str | None, state_rates: dict[str, float] | None = None) -> float:
    return income * state_rate(state, state_rates)
