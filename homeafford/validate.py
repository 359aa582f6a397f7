"""Input validation, run before a scenario reaches the solver."""

from homeafford.params import (
    ANNUALIZATION_FACTORS,
    FHA_DOWN_PAYMENT_PCT,
    LOAN_TERMS,
    DownPayment,
    FinancialExtras,
    IncomeSpec,
    Jurisdiction,
    LoanTerms,
    ScenarioParams,
    TakeHomeIncome,
)
from homeafford.tax_data import canonical_state


class ValidationError(ValueError):
    """Malformed or out-of-range user input."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValidationError(message)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value


def _is_optional_str(value) -> bool:
    return value is None or isinstance(value, str)


def validate_income(income: IncomeSpec | TakeHomeIncome) -> None:
    if isinstance(income, TakeHomeIncome):
        _require(_is_number(income.monthly_take_home), "Monthly take-home pay must be a number.")
        _require(income.monthly_take_home > 0, "Please enter a valid monthly take-home amount.")
        return
    _require(_is_number(income.amount), "Income must be a number.")
    _require(income.amount > 0, "Please enter a valid income amount.")
    _require(
        isinstance(income.frequency, str) and income.frequency in ANNUALIZATION_FACTORS,
        f"Unknown pay frequency '{income.frequency}'. "
        f"Supported: {list(ANNUALIZATION_FACTORS)}",
    )


def validate_jurisdiction(jurisdiction: Jurisdiction) -> None:
    _require(
        isinstance(jurisdiction.state, str) and canonical_state(jurisdiction.state) is not None,
        f"Unknown state '{jurisdiction.state}'. State selection is required for tax calculation.",
    )
    _require(_is_optional_str(jurisdiction.subdivision), "Subdivision must be a name.")


def validate_down_payment(down: DownPayment) -> None:
    _require(down.mode in ("percent", "amount"), "Down payment mode must be 'percent' or 'amount'.")
    if down.mode == "percent":
        _require(_is_number(down.percent), "Down payment percent must be a number.")
        _require(0 <= down.percent <= 100, "Down payment must be between 0% and 100%.")
    else:
        _require(_is_number(down.amount), "Down payment amount must be a number.")
        _require(down.amount >= 0, "Please enter a valid down payment amount.")


def validate_loan(loan: LoanTerms) -> None:
    validate_down_payment(loan.down_payment)
    if loan.interest_rate is not None:
        _require(_is_number(loan.interest_rate), "Interest rate must be a number.")
        _require(loan.interest_rate >= 0, "Please enter a valid interest rate.")
    _require(loan.term_years in LOAN_TERMS, f"Loan term must be one of {list(LOAN_TERMS)} years.")
    if loan.home_price is not None:
        validate_home_price(loan.home_price, loan.down_payment)


def validate_home_price(home_price: float, down: DownPayment | None = None) -> None:
    _require(_is_number(home_price) and home_price > 0, "Please enter a valid home price.")
    if down is not None and down.mode == "amount":
        _require(down.amount <= home_price, "Down payment exceeds home price.")


def validate_extras(extras: FinancialExtras) -> None:
    _require(
        _is_number(extras.monthly_debts) and extras.monthly_debts >= 0,
        "Please enter a valid monthly debt amount.",
    )
    if extras.custom_property_tax_rate is not None:
        _require(
            _is_number(extras.custom_property_tax_rate) and extras.custom_property_tax_rate >= 0,
            "Please enter a valid property tax rate.",
        )
    _require(
        _is_number(extras.annual_insurance) and extras.annual_insurance >= 0,
        "Please enter a valid home insurance amount.",
    )
    _require(
        _is_optional_str(extras.property_tax_state) and _is_optional_str(extras.property_tax_county),
        "Property tax state and county must be names.",
    )


def validate_scenario(params: ScenarioParams) -> None:
    validate_income(params.income)
    # A custom take-home amount skips the tax calculation, so no state is needed
    if not isinstance(params.income, TakeHomeIncome):
        validate_jurisdiction(params.jurisdiction)
    validate_loan(params.loan)
    validate_extras(params.extras)
    if params.extras.fha:
        down = params.loan.down_payment
        _require(
            down in (DownPayment(), DownPayment.percent_of(FHA_DOWN_PAYMENT_PCT)),
            f"FHA loans use the {FHA_DOWN_PAYMENT_PCT}% minimum down payment; "
            "remove the custom down payment or turn off FHA.",
        )
