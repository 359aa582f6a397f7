"""Total tax burden: federal + FICA + state + local."""

from dataclasses import dataclass

from homeafford.local_tax import has_local_tax, local_tax
from homeafford.tax import PayrollTax, bracket_tax, payroll_tax, state_tax
from homeafford.tax_data import DEFAULT_TABLES, RateTables


@dataclass(frozen=True)
class TaxBurden:
    """Annual taxes on gross income. Derived on every solve, never stored."""

    federal: float
    payroll: PayrollTax
    state: float
    local: float
    total: float
    effective_rate: float  # total / gross annual income

    @classmethod
    def zero(cls) -> "TaxBurden":
        return cls(
            federal=0.0,
            payroll=PayrollTax(social_security=0.0, medicare=0.0),
            state=0.0,
            local=0.0,
            total=0.0,
            effective_rate=0.0,
        )


def total_burden(
    annual_income: float,
    state: str | None,
    subdivision: str | None = None,
    tables: RateTables = DEFAULT_TABLES,
) -> TaxBurden:
    """Compose all tax layers for one household income."""
    federal = bracket_tax(annual_income, tables.federal_brackets)
    payroll = payroll_tax(annual_income, tables.payroll)
    state_amount = state_tax(annual_income, state, tables.state_rates)
    if subdivision and has_local_tax(state, tables):
        local = local_tax(annual_income, state, subdivision, tables)
    else:
        local = 0.0

    total = federal + payroll.total + state_amount + local
    effective_rate = total / annual_income if annual_income > 0 else 0.0

    return TaxBurden(
        federal=federal,
        payroll=payroll,
        state=state_amount,
        local=local,
        total=total,
        effective_rate=effective_rate,
    )
