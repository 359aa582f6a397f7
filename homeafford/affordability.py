"""Home affordability solver.

Two modes share income normalization and the tax burden:

Maximize (no home price given):
  - Housing budget (PITI) = min(28% of gross, 36% of gross - other debts)
  - Property tax, insurance and FHA premium are first estimated on a
    placeholder home value and subtracted to get the P&I budget
  - The P&I budget is inverted into a maximum loan, then a home price
  - Add-ons are recomputed on the solved price. This two-pass
    estimate-then-correct is a fixed-point approximation of the circular
    price <-> add-on dependency, so the corrected PITI can differ from the
    budget by the add-on estimation error.

Evaluate (home price given):
  - Down payment, loan, P&I and add-ons follow directly from the price.

Both modes report payment ratios, a traffic-light tier and the same loan at
each standard term.
"""

import logging
from dataclasses import dataclass

from homeafford.burden import TaxBurden, total_burden
from homeafford.mortgage import max_principal, monthly_payment, total_interest
from homeafford.params import (
    LOAN_TERMS,
    FinancialExtras,
    IncomeSpec,
    Jurisdiction,
    LoanTerms,
    ScenarioParams,
    TakeHomeIncome,
    effective_down_payment,
)
from homeafford.tax_data import DEFAULT_TABLES, RateTables, canonical_state

logger = logging.getLogger(__name__)

FRONT_END_RATIO = 0.28
BACK_END_RATIO = 0.36

PLACEHOLDER_HOME_PRICE = 300_000
FHA_MIP_RATE = 0.0085  # annual premium as a fraction of price

# (green upper bound, yellow upper bound) in % of gross income
TIER_LIMITS = {
    True: (36.0, 42.0),  # has other debts: back-end rule
    False: (28.0, 32.0),  # front-end rule
}


class InsufficientIncomeError(ValueError):
    """Income and debts leave no room for a mortgage payment."""

    def __init__(self, max_piti: float, add_ons: float):
        self.max_piti = max_piti
        self.add_ons = add_ons
        super().__init__(
            "Your expenses and debts are too high relative to your income for a mortgage "
            f"(housing budget ${max_piti:,.0f}/month, taxes and insurance ${add_ons:,.0f}/month)"
        )


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IncomeSummary:
    annual_income: float
    monthly_gross_income: float
    monthly_net_income: float
    tax_burden: TaxBurden


@dataclass(frozen=True)
class HousingAddOns:
    """Monthly non-P&I housing costs."""

    property_tax: float
    insurance: float
    mortgage_insurance: float

    @property
    def total(self) -> float:
        return self.property_tax + self.insurance + self.mortgage_insurance


@dataclass(frozen=True)
class TermOption:
    term_years: int
    interest_rate: float
    payment: float  # P&I
    total_payment: float  # P&I + add-ons
    total_interest: float
    percent_of_gross_income: float
    percent_of_net_income: float
    affordability_tier: str


@dataclass(frozen=True)
class AffordabilityResult:
    mode: str  # "maximize" or "evaluate"
    annual_income: float
    monthly_gross_income: float
    monthly_net_income: float
    home_price: float
    loan_amount: float
    down_payment_amount: float
    down_payment_percent: float
    interest_rate: float
    term_years: int
    monthly_principal_and_interest: float
    monthly_property_tax: float
    monthly_insurance: float
    monthly_mortgage_insurance: float
    total_monthly_payment: float
    percent_of_gross_income: float
    percent_of_net_income: float
    affordability_tier: str
    is_affordable: bool
    property_tax_rate: float
    tax_burden: TaxBurden
    term_options: dict[int, TermOption]


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


def _percent(part: float, whole: float) -> float:
    return part * 100 / whole if whole > 0 else 0.0


def normalize_income(
    income: IncomeSpec | TakeHomeIncome,
    jurisdiction: Jurisdiction,
    tables: RateTables = DEFAULT_TABLES,
) -> IncomeSummary:
    """Annual and monthly gross/net income plus the tax burden behind it."""
    if isinstance(income, TakeHomeIncome):
        return IncomeSummary(
            annual_income=income.annual,
            monthly_gross_income=income.monthly_gross,
            monthly_net_income=income.monthly_take_home,
            tax_burden=TaxBurden.zero(),
        )

    annual = income.annual
    burden = total_burden(annual, jurisdiction.state, jurisdiction.subdivision, tables)
    return IncomeSummary(
        annual_income=annual,
        monthly_gross_income=annual / 12,
        monthly_net_income=(annual - burden.total) / 12,
        tax_burden=burden,
    )


def default_interest_rate(term_years: int, tables: RateTables = DEFAULT_TABLES) -> float:
    rates = tables.default_interest_rates
    return rates.get(term_years, rates[30])


def interest_rate_for(loan: LoanTerms, tables: RateTables = DEFAULT_TABLES) -> float:
    if loan.interest_rate is None:
        return default_interest_rate(loan.term_years, tables)
    return loan.interest_rate


def property_tax_rate(extras: FinancialExtras, tables: RateTables = DEFAULT_TABLES) -> float:
    """County rate when the county is in the table, else the custom rate."""
    fallback = extras.custom_property_tax_rate
    if fallback is None:
        fallback = tables.default_property_tax_rate
    state = canonical_state(extras.property_tax_state)
    if state is None or not extras.property_tax_county:
        return fallback
    rate = tables.property_tax_rates.get(state, {}).get(extras.property_tax_county)
    if rate is None:
        logger.info(
            "No property tax rate for %s, %s; using %.2f%%",
            extras.property_tax_county, state, fallback * 100,
        )
        return fallback
    return rate


def housing_add_ons(
    home_price: float, extras: FinancialExtras, tables: RateTables = DEFAULT_TABLES
) -> HousingAddOns:
    prop_tax = home_price * property_tax_rate(extras, tables) / 12 if extras.include_property_tax else 0.0
    insurance = extras.annual_insurance / 12 if extras.include_home_insurance else 0.0
    mip = home_price * FHA_MIP_RATE / 12 if extras.fha else 0.0
    return HousingAddOns(property_tax=prop_tax, insurance=insurance, mortgage_insurance=mip)


def affordability_tier(percent_of_gross: float, has_debts: bool) -> str:
    """'green', 'yellow' or 'red'. Each bound includes its upper limit."""
    green, yellow = TIER_LIMITS[has_debts]
    if percent_of_gross <= green:
        return "green"
    if percent_of_gross <= yellow:
        return "yellow"
    return "red"


def is_affordable(total_monthly_payment: float, monthly_gross: float, monthly_debts: float) -> bool:
    """Back-end 36% rule when there are other debts, front-end 28% otherwise."""
    if monthly_debts > 0:
        return _percent(total_monthly_payment + monthly_debts, monthly_gross) <= BACK_END_RATIO * 100
    return _percent(total_monthly_payment, monthly_gross) <= FRONT_END_RATIO * 100


def term_options(
    loan_amount: float,
    add_ons: HousingAddOns,
    summary: IncomeSummary,
    has_debts: bool,
    tables: RateTables = DEFAULT_TABLES,
) -> dict[int, TermOption]:
    """The same loan at every standard term, each at its default rate."""
    options = {}
    for term in LOAN_TERMS:
        rate = default_interest_rate(term, tables)
        payment = monthly_payment(loan_amount, rate, term)
        total = payment + add_ons.total
        pct_gross = _percent(total, summary.monthly_gross_income)
        options[term] = TermOption(
            term_years=term,
            interest_rate=rate,
            payment=payment,
            total_payment=total,
            total_interest=total_interest(loan_amount, rate, term),
            percent_of_gross_income=pct_gross,
            percent_of_net_income=_percent(total, summary.monthly_net_income),
            affordability_tier=affordability_tier(pct_gross, has_debts),
        )
    return options


def _build_result(
    mode: str,
    summary: IncomeSummary,
    home_price: float,
    loan: LoanTerms,
    extras: FinancialExtras,
    tables: RateTables,
) -> AffordabilityResult:
    down_amount, down_pct = effective_down_payment(loan, extras).resolve(home_price)
    loan_amount = max(home_price - down_amount, 0.0)
    rate = interest_rate_for(loan, tables)

    pi = monthly_payment(loan_amount, rate, loan.term_years)
    add_ons = housing_add_ons(home_price, extras, tables)
    total = pi + add_ons.total
    pct_gross = _percent(total, summary.monthly_gross_income)

    return AffordabilityResult(
        mode=mode,
        annual_income=summary.annual_income,
        monthly_gross_income=summary.monthly_gross_income,
        monthly_net_income=summary.monthly_net_income,
        home_price=home_price,
        loan_amount=loan_amount,
        down_payment_amount=down_amount,
        down_payment_percent=down_pct,
        interest_rate=rate,
        term_years=loan.term_years,
        monthly_principal_and_interest=pi,
        monthly_property_tax=add_ons.property_tax,
        monthly_insurance=add_ons.insurance,
        monthly_mortgage_insurance=add_ons.mortgage_insurance,
        total_monthly_payment=total,
        percent_of_gross_income=pct_gross,
        percent_of_net_income=_percent(total, summary.monthly_net_income),
        affordability_tier=affordability_tier(pct_gross, extras.has_debts),
        is_affordable=is_affordable(total, summary.monthly_gross_income, extras.monthly_debts),
        property_tax_rate=property_tax_rate(extras, tables),
        tax_burden=summary.tax_burden,
        term_options=term_options(loan_amount, add_ons, summary, extras.has_debts, tables),
    )


# ---------------------------------------------------------------------------
# Solvers
# ---------------------------------------------------------------------------


def max_housing_payment(monthly_gross: float, monthly_debts: float = 0.0) -> float:
    """Largest PITI allowed by the front-end and back-end ratios."""
    front_end = monthly_gross * FRONT_END_RATIO
    back_end = monthly_gross * BACK_END_RATIO - monthly_debts
    return min(front_end, back_end)


def compute_max_affordability(
    income: IncomeSpec | TakeHomeIncome,
    jurisdiction: Jurisdiction,
    loan: LoanTerms,
    extras: FinancialExtras,
    tables: RateTables = DEFAULT_TABLES,
) -> AffordabilityResult:
    """Most expensive home the household can carry.

    Raises InsufficientIncomeError when nothing is left for P&I.
    """
    summary = normalize_income(income, jurisdiction, tables)
    max_piti = max_housing_payment(summary.monthly_gross_income, extras.monthly_debts)

    estimate = housing_add_ons(PLACEHOLDER_HOME_PRICE, extras, tables)
    max_pi = max_piti - estimate.total
    if max_pi <= 0:
        raise InsufficientIncomeError(max_piti, estimate.total)

    rate = interest_rate_for(loan, tables)
    principal = max_principal(max_pi, rate, loan.term_years)

    down = effective_down_payment(loan, extras)
    if down.mode == "percent":
        # Loan and deposit are both shares of the solved price
        financed = 1 - down.percent / 100
        home_price = principal / financed if financed > 0 else 0.0
    else:
        home_price = principal + down.amount

    logger.debug("Max P&I %.2f at %.3f%% -> home price %.2f", max_pi, rate, home_price)
    return _build_result("maximize", summary, home_price, loan, extras, tables)


def evaluate_home_price(
    home_price: float,
    income: IncomeSpec | TakeHomeIncome,
    jurisdiction: Jurisdiction,
    loan: LoanTerms,
    extras: FinancialExtras,
    tables: RateTables = DEFAULT_TABLES,
) -> AffordabilityResult:
    """Payments and ratios for a specific home price."""
    summary = normalize_income(income, jurisdiction, tables)
    return _build_result("evaluate", summary, home_price, loan, extras, tables)


def solve(params: ScenarioParams, tables: RateTables = DEFAULT_TABLES) -> AffordabilityResult:
    """Evaluate ``params.loan.home_price`` when set, otherwise maximize."""
    if params.loan.home_price is not None:
        return evaluate_home_price(
            params.loan.home_price, params.income, params.jurisdiction,
            params.loan, params.extras, tables,
        )
    return compute_max_affordability(
        params.income, params.jurisdiction, params.loan, params.extras, tables,
    )
