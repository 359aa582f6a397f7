"""YAML/JSON loading for scenarios and rate tables."""

import json
import logging
from dataclasses import asdict, replace
from pathlib import Path

import yaml

from homeafford.affordability import AffordabilityResult
from homeafford.params import (
    DownPayment,
    FinancialExtras,
    IncomeSpec,
    Jurisdiction,
    LoanTerms,
    ScenarioParams,
    TakeHomeIncome,
)
from homeafford.tax_data import (
    DEFAULT_TABLES,
    Bracket,
    FixedAmount,
    FlatRate,
    LocalTaxTable,
    PayrollConstants,
    RangeRate,
    RateTables,
    TableBased,
    canonical_state,
)
from homeafford.validate import ValidationError

logger = logging.getLogger(__name__)


def _read_data(path: str | Path) -> dict:
    """Parse a YAML or JSON file into a dict."""
    path = Path(path)
    text = path.read_text()
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Could not parse {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must contain a mapping at the top level")
    return data


def _known(cls, data: dict) -> dict:
    return {k: v for k, v in data.items() if hasattr(cls, k)}


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


def load_config(path: str | Path) -> ScenarioParams:
    """Load scenario parameters from a YAML or JSON file."""
    return dict_to_params(_read_data(path))


def dict_to_params(data: dict) -> ScenarioParams:
    """Convert a nested dict to ScenarioParams. Unknown keys are ignored."""
    income_data = data.get("income", {})
    jurisdiction_data = data.get("jurisdiction", {})
    extras_data = data.get("extras", {})

    try:
        loan_data = dict(data.get("loan", {}))
        if income_data.get("monthly_take_home") is not None:
            income = TakeHomeIncome(monthly_take_home=income_data["monthly_take_home"])
        else:
            income = IncomeSpec(**_known(IncomeSpec, income_data))

        down_data = loan_data.pop("down_payment", None) or {}
        loan = LoanTerms(
            down_payment=DownPayment(**_known(DownPayment, down_data)),
            **_known(LoanTerms, loan_data),
        )

        return ScenarioParams(
            income=income,
            jurisdiction=Jurisdiction(**_known(Jurisdiction, jurisdiction_data)),
            loan=loan,
            extras=FinancialExtras(**_known(FinancialExtras, extras_data)),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed scenario: {exc}") from exc


def params_to_dict(params: ScenarioParams) -> dict:
    """Convert ScenarioParams to a serialisable dict."""
    return asdict(params)


# ---------------------------------------------------------------------------
# Rate tables
# ---------------------------------------------------------------------------

_RULE_PARSERS = {
    "flat": lambda value: FlatRate(float(value)),
    "range": lambda value: RangeRate(*_range_bounds(value)),
    "fixed": lambda value: FixedAmount(float(value)),
    "table": lambda value: TableBased(_table_params(value)),
}


def _range_bounds(value) -> tuple[float, float]:
    if isinstance(value, dict):
        return float(value["min"]), float(value["max"])
    low, high = value
    return float(low), float(high)


def _table_params(value: dict) -> dict:
    params = dict(value)
    if "brackets" in params:
        params["brackets"] = _parse_brackets(params["brackets"])
    return params


def _parse_brackets(entries: list[dict]) -> list[Bracket]:
    return [
        Bracket(
            float(e["min"]),
            float("inf") if e.get("max") is None else float(e["max"]),
            float(e["rate"]),
        )
        for e in entries
    ]


def _parse_local_table(state: str, data: dict) -> LocalTaxTable:
    shape = data.get("shape", "flat")
    parser = _RULE_PARSERS.get(shape)
    if parser is None:
        raise ValidationError(
            f"Unknown local tax shape '{shape}' for {state}. Supported: {list(_RULE_PARSERS)}"
        )
    subdivisions = {name: parser(value) for name, value in data.get("subdivisions", {}).items()}
    return LocalTaxTable(data.get("tax_type", "city"), subdivisions)


def _state_key(name: str) -> str:
    state = canonical_state(name)
    if state is None:
        logger.warning("Rate table entry for unknown state '%s' kept as is", name)
        return name
    return state


def dict_to_tables(data: dict, base: RateTables = DEFAULT_TABLES) -> RateTables:
    """Overlay ``data`` on ``base``.

    ``federal_brackets``, ``payroll`` and the scalar defaults replace the
    base values; ``state_rates``, ``local_tax``, ``property_tax_rates`` and
    ``default_interest_rates`` merge per key.
    """
    changes = {}
    try:
        if "federal_brackets" in data:
            changes["federal_brackets"] = _parse_brackets(data["federal_brackets"])
        if "payroll" in data:
            changes["payroll"] = PayrollConstants(**_known(PayrollConstants, data["payroll"]))
        if "state_rates" in data:
            rates = dict(base.state_rates)
            rates.update({_state_key(k): float(v) for k, v in data["state_rates"].items()})
            changes["state_rates"] = rates
        if "local_tax" in data:
            local = dict(base.local_tax)
            for state, table in data["local_tax"].items():
                local[_state_key(state)] = _parse_local_table(state, table)
            changes["local_tax"] = local
        if "property_tax_rates" in data:
            prop = dict(base.property_tax_rates)
            for state, counties in data["property_tax_rates"].items():
                prop[_state_key(state)] = {k: float(v) for k, v in counties.items()}
            changes["property_tax_rates"] = prop
        if "default_property_tax_rate" in data:
            changes["default_property_tax_rate"] = float(data["default_property_tax_rate"])
        if "default_interest_rates" in data:
            rates = dict(base.default_interest_rates)
            rates.update({int(k): float(v) for k, v in data["default_interest_rates"].items()})
            changes["default_interest_rates"] = rates
        return replace(base, **changes)
    except ValidationError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed rate table: {exc}") from exc


def load_rate_tables(path: str | Path, base: RateTables = DEFAULT_TABLES) -> RateTables:
    """Load rate-table overrides from a YAML or JSON file."""
    return dict_to_tables(_read_data(path), base)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


def result_to_dict(result: AffordabilityResult) -> dict:
    """JSON-ready dict of a result (e.g. a web response body)."""
    d = asdict(result)
    d["tax_burden"]["payroll"]["total"] = result.tax_burden.payroll.total
    d["term_options"] = {str(term): option for term, option in d["term_options"].items()}
    return d
