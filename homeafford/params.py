"""Input snapshot for an affordability calculation.

All parameter objects are frozen: a calculation reads one snapshot and a
change produces a new snapshot (``dataclasses.replace``) rather than
updating fields in place.
"""

from dataclasses import dataclass, field

# Multiplier from pay period to annual income. Hourly assumes a 40-hour week.
ANNUALIZATION_FACTORS = {
    "hourly": 40 * 52,
    "weekly": 52,
    "biweekly": 26,
    "monthly": 12,
    "annual": 1,
}

# Gross estimate for a household that only knows its take-home pay
TAKE_HOME_GROSS_UP = 1.3

LOAN_TERMS = (10, 15, 30)

FHA_DOWN_PAYMENT_PCT = 3.5


@dataclass(frozen=True)
class IncomeSpec:
    """Gross pay per period."""

    amount: float = 100_000
    frequency: str = "annual"

    @property
    def annual(self) -> float:
        return self.amount * ANNUALIZATION_FACTORS[self.frequency]


@dataclass(frozen=True)
class TakeHomeIncome:
    """Net monthly pay entered directly; gross is estimated from it."""

    monthly_take_home: float

    @property
    def monthly_gross(self) -> float:
        return self.monthly_take_home * TAKE_HOME_GROSS_UP

    @property
    def annual(self) -> float:
        return self.monthly_gross * 12


@dataclass(frozen=True)
class Jurisdiction:
    """A state plus an optional local taxing subdivision."""

    state: str | None = None
    subdivision: str | None = None


@dataclass(frozen=True)
class DownPayment:
    """Down payment given either as a percent of price or a dollar amount.

    Whichever representation the user did not choose is derived from the
    home price in force via ``resolve``.
    """

    mode: str = "percent"  # "percent" or "amount"
    percent: float = 20.0
    amount: float = 0.0

    @classmethod
    def percent_of(cls, percent: float) -> "DownPayment":
        return cls(mode="percent", percent=percent)

    @classmethod
    def fixed(cls, amount: float) -> "DownPayment":
        return cls(mode="amount", amount=amount)

    def resolve(self, home_price: float) -> tuple[float, float]:
        """Return (amount, percent) for ``home_price``."""
        if self.mode == "percent":
            return home_price * self.percent / 100, self.percent
        percent = self.amount / home_price * 100 if home_price > 0 else 0.0
        return self.amount, percent


@dataclass(frozen=True)
class LoanTerms:
    """Loan parameters. ``home_price`` is only used when evaluating a price."""

    home_price: float | None = None
    down_payment: DownPayment = field(default_factory=DownPayment)
    interest_rate: float | None = None  # % p.a.; None = default for the term
    term_years: int = 30


@dataclass(frozen=True)
class FinancialExtras:
    """Debts and housing add-ons on top of principal and interest."""

    monthly_debts: float = 0.0
    include_property_tax: bool = True
    property_tax_state: str | None = None
    property_tax_county: str | None = None
    custom_property_tax_rate: float | None = None  # used when no county rate is known; None = table default
    include_home_insurance: bool = True
    annual_insurance: float = 1_200
    fha: bool = False  # FHA loan: minimum down payment plus mortgage insurance premium

    @property
    def has_debts(self) -> bool:
        return self.monthly_debts > 0


def effective_down_payment(loan: LoanTerms, extras: FinancialExtras) -> DownPayment:
    """Down payment in force. FHA loans are locked to the FHA minimum."""
    if extras.fha:
        return DownPayment.percent_of(FHA_DOWN_PAYMENT_PCT)
    return loan.down_payment


@dataclass(frozen=True)
class ScenarioParams:
    """Complete input snapshot."""

    income: IncomeSpec | TakeHomeIncome = field(default_factory=IncomeSpec)
    jurisdiction: Jurisdiction = field(default_factory=lambda: Jurisdiction(state="Texas"))
    loan: LoanTerms = field(default_factory=LoanTerms)
    extras: FinancialExtras = field(default_factory=FinancialExtras)
