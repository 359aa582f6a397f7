"""Sensitivity analysis: sweep one input, see how affordability changes."""

from dataclasses import dataclass, fields, is_dataclass, replace

import numpy as np
import pandas as pd

from homeafford.affordability import InsufficientIncomeError, solve
from homeafford.output import fmt
from homeafford.params import ScenarioParams
from homeafford.tax_data import DEFAULT_TABLES, RateTables
from homeafford.validate import ValidationError, validate_scenario


@dataclass
class SweepResult:
    param_value: float
    home_price: float
    loan_amount: float
    total_monthly_payment: float
    percent_of_gross_income: float
    affordability_tier: str
    feasible: bool  # False when the value is invalid or income leaves no room for a mortgage
    note: str = ""


def _with_nested_attr(obj, path: str, value):
    """Copy of a frozen dataclass tree with ``path`` (e.g. 'loan.interest_rate') set."""
    head, _, rest = path.partition(".")
    if not is_dataclass(obj) or head not in {f.name for f in fields(obj)}:
        raise ValidationError(f"Unknown parameter '{head}' on {type(obj).__name__}")
    if rest:
        return replace(obj, **{head: _with_nested_attr(getattr(obj, head), rest, value)})
    if is_dataclass(getattr(obj, head)):
        raise ValidationError(f"'{head}' is a section, not a single value")
    return replace(obj, **{head: value})


def sweep(
    params: ScenarioParams,
    param_path: str,
    values: list[float],
    tables: RateTables = DEFAULT_TABLES,
) -> list[SweepResult]:
    """Solve the scenario for each value of a parameter, return results.

    Each swept scenario is validated; an invalid value or one that leaves
    no room for a mortgage becomes an infeasible row with a note.
    """
    results = []
    for val in values:
        p = _with_nested_attr(params, param_path, val)
        try:
            validate_scenario(p)
            r = solve(p, tables)
        except ValidationError as exc:
            results.append(SweepResult(val, 0.0, 0.0, 0.0, 0.0, "red", False, f"invalid: {exc}"))
            continue
        except InsufficientIncomeError:
            results.append(SweepResult(val, 0.0, 0.0, 0.0, 0.0, "red", False, "insufficient income"))
            continue
        results.append(SweepResult(
            param_value=val,
            home_price=r.home_price,
            loan_amount=r.loan_amount,
            total_monthly_payment=r.total_monthly_payment,
            percent_of_gross_income=r.percent_of_gross_income,
            affordability_tier=r.affordability_tier,
            feasible=True,
        ))

    return results


def format_sweep(
    param_path: str,
    results: list[SweepResult],
    is_percentage: bool = True,
) -> str:
    """Format sweep results as a table."""
    label = param_path.split(".")[-1]
    header = (
        f"{'':>2} {label:>14} | {'Home price':>12} | {'Loan':>12} | "
        f"{'Payment':>10} | {'% Gross':>7} | {'Tier':>6}"
    )
    sep = "-" * len(header)
    lines = [f"Sensitivity: {param_path}", header, sep]

    for r in results:
        if is_percentage:
            val_str = f"{r.param_value:.2f}%"
        else:
            val_str = f"{r.param_value:,.0f}"
        if not r.feasible:
            lines.append(f"{'':>2} {val_str:>14} | {r.note}")
            continue
        lines.append(
            f"{'':>2} {val_str:>14} | {fmt(r.home_price):>12} | {fmt(r.loan_amount):>12} | "
            f"{fmt(r.total_monthly_payment):>10} | {r.percent_of_gross_income:>6.1f}% | "
            f"{r.affordability_tier:>6}"
        )

    return "\n".join(lines)


def sweep_dataframe(param_path: str, results: list[SweepResult]) -> pd.DataFrame:
    """Sweep results as a DataFrame indexed by the swept value."""
    df = pd.DataFrame([vars(r) for r in results])
    return df.rename(columns={"param_value": param_path}).set_index(param_path)


def frange(start: float, stop: float, step: float) -> list[float]:
    """Floats from start to stop (inclusive) by step."""
    # half-step tolerance keeps ``stop`` despite floating point drift
    values = np.arange(start, stop + step / 2, step)
    return [round(float(v), 6) for v in values]


def rate_curve(monthly_payment: float, rates_pct, term_years: int) -> np.ndarray:
    """Max principal a fixed P&I payment supports at each annual rate (%)."""
    r = np.asarray(rates_pct, dtype=float) / 100 / 12
    n = term_years * 12
    safe_r = np.where(r == 0, 1.0, r)
    annuity = np.where(r == 0, n, (1 - (1 + safe_r) ** -n) / safe_r)
    return monthly_payment * annuity
