"""Local (county, city, school district) income taxes.

Each state with local taxation has one ``LocalTaxTable`` whose subdivisions
share a rule shape:

  - FlatRate:    income * rate
  - RangeRate:   income * midpoint of the authorised range. This is an
                 approximation of the real local schedule, not a bracket
                 computation.
  - FixedAmount: a flat dollar amount, whatever the income
  - TableBased:  handed to the strategy registered for the state

Missing data is never an error here: an unknown state, an empty
subdivision or an unmapped subdivision all contribute 0 so that optional
local precision cannot abort an affordability calculation.
"""

import logging
from typing import Any, Callable

from homeafford.tax import bracket_tax, state_rate
from homeafford.tax_data import (
    DEFAULT_TABLES,
    FixedAmount,
    FlatRate,
    LocalTaxRule,
    RangeRate,
    RateTables,
    TableBased,
    canonical_state,
)

logger = logging.getLogger(__name__)

LocalTaxStrategy = Callable[[float, dict[str, Any], float], float]

LOCAL_TAX_STRATEGIES: dict[str, LocalTaxStrategy] = {}


def local_tax_strategy(state: str) -> Callable[[LocalTaxStrategy], LocalTaxStrategy]:
    """Register ``fn(income, params, state_tax_rate)`` as the table-based rule for a state."""

    def register(fn: LocalTaxStrategy) -> LocalTaxStrategy:
        LOCAL_TAX_STRATEGIES[state] = fn
        return fn

    return register


# ---------------------------------------------------------------------------
# State strategies
# ---------------------------------------------------------------------------


@local_tax_strategy("Michigan")
def michigan_local_tax(income: float, params: dict[str, Any], state_tax_rate: float) -> float:
    """City rate on income above the city's personal exemption."""
    taxable = max(income - params.get("exemption", 0), 0)
    return taxable * params.get("rate", 0.0)


@local_tax_strategy("New York")
def new_york_local_tax(income: float, params: dict[str, Any], state_tax_rate: float) -> float:
    """NYC progressive city brackets, or the Yonkers surcharge on state tax."""
    if "brackets" in params:
        return bracket_tax(income, params["brackets"])
    return income * state_tax_rate * params.get("surcharge", 0.0)


@local_tax_strategy("Oregon")
def oregon_local_tax(income: float, params: dict[str, Any], state_tax_rate: float) -> float:
    """Statewide transit tax, income-threshold surtaxes and flat fees."""
    tax = income * params.get("transit_rate", 0.0)
    for surtax in params.get("surtaxes", []):
        tax += max(income - surtax["threshold"], 0) * surtax["rate"]
    if income > params.get("flat_fee_min_income", 0):
        tax += params.get("flat_fee", 0)
    return tax


@local_tax_strategy("Iowa")
def iowa_local_tax(income: float, params: dict[str, Any], state_tax_rate: float) -> float:
    """School district surtax, a percentage of the state income tax."""
    return income * state_tax_rate * params.get("surtax", 0.0)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


def _rule_tax(rule: LocalTaxRule, income: float, state: str, tables: RateTables) -> float:
    if isinstance(rule, FlatRate):
        return income * rule.rate
    if isinstance(rule, RangeRate):
        return income * rule.rate
    if isinstance(rule, FixedAmount):
        return rule.amount
    if isinstance(rule, TableBased):
        strategy = LOCAL_TAX_STRATEGIES.get(state)
        if strategy is None:
            logger.warning("No local tax strategy registered for %s; using 0", state)
            return 0.0
        return strategy(income, rule.params, state_rate(state, tables.state_rates))
    raise TypeError(f"Unsupported local tax rule: {rule!r}")


def local_tax(
    income: float,
    state: str | None,
    subdivision: str | None,
    tables: RateTables = DEFAULT_TABLES,
) -> float:
    """Local income tax for a resident of ``subdivision`` in ``state``."""
    name = canonical_state(state)
    table = tables.local_tax.get(name) if name else None
    if table is None or not subdivision:
        return 0.0

    rule = table.subdivisions.get(subdivision)
    if rule is None:
        logger.warning(
            "Unknown %s subdivision '%s' for %s; local tax set to 0",
            table.tax_type, subdivision, name,
        )
        return 0.0
    return max(_rule_tax(rule, income, name, tables), 0.0)


def has_local_tax(state: str | None, tables: RateTables = DEFAULT_TABLES) -> bool:
    name = canonical_state(state)
    return name is not None and name in tables.local_tax


def jurisdictions_for(state: str | None, tables: RateTables = DEFAULT_TABLES) -> list[str]:
    """Subdivision names for a state, in table order ([] without local tax)."""
    name = canonical_state(state)
    if name is None or name not in tables.local_tax:
        return []
    return list(tables.local_tax[name].subdivisions)


JURISDICTION_LABELS = {
    "county": "County",
    "city": "City/Municipality",
    "school_district": "School District",
    "both": "City/County",
}


def jurisdiction_label(state: str | None, tables: RateTables = DEFAULT_TABLES) -> str:
    """Label for the subdivision picker of a state."""
    name = canonical_state(state)
    table = tables.local_tax.get(name) if name else None
    if table is None:
        return "Municipality/City"
    return JURISDICTION_LABELS.get(table.tax_type, "Municipality/City")
