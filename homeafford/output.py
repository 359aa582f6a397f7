"""Output formatting for affordability results."""

import csv
import io

import pandas as pd

from homeafford.affordability import AffordabilityResult
from homeafford.params import ScenarioParams, TakeHomeIncome, effective_down_payment
from homeafford.tax import marginal_rate
from homeafford.tax_data import DEFAULT_TABLES, RateTables

TIER_LABELS = {
    "green": "Comfortable",
    "yellow": "Stretch",
    "red": "Over budget",
}


def fmt(value: float) -> str:
    """Format a dollar amount."""
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:,.2f}M"
    return f"${value:,.0f}"


def summary_header(params: ScenarioParams) -> str:
    """Generate the header showing key inputs."""
    income = params.income
    jur = params.jurisdiction
    loan = params.loan

    if isinstance(income, TakeHomeIncome):
        income_line = f"  Take-home pay:   {fmt(income.monthly_take_home)}/month (gross estimated)"
    else:
        income_line = f"  Income:          {fmt(income.amount)} ({income.frequency})"

    location = jur.state or "-"
    if jur.subdivision:
        location = f"{jur.subdivision}, {location}"

    down = effective_down_payment(loan, params.extras)
    if down.mode == "percent":
        down_line = f"  Down payment:    {down.percent:.1f}%"
    else:
        down_line = f"  Down payment:    {fmt(down.amount)}"

    rate = "default" if loan.interest_rate is None else f"{loan.interest_rate:.2f}%"
    lines = [
        "Home Affordability",
        "=" * 70,
        "",
        income_line,
        f"  Location:        {location}",
        down_line,
        f"  Loan:            {loan.term_years}yr at {rate}",
        f"  Other debts:     {fmt(params.extras.monthly_debts)}/month",
        "",
    ]
    if params.extras.fha:
        lines.insert(7, "  FHA loan:        yes (MIP 0.85%/yr)")
    return "\n".join(lines)


def tax_table(result: AffordabilityResult, tables: RateTables = DEFAULT_TABLES) -> str:
    """Annual tax breakdown."""
    burden = result.tax_burden
    rows = [
        ("Federal", burden.federal),
        ("Social Security", burden.payroll.social_security),
        ("Medicare", burden.payroll.medicare),
        ("State", burden.state),
        ("Local", burden.local),
    ]
    lines = ["Taxes (annual):"]
    for label, amount in rows:
        lines.append(f"  {label:<16} {fmt(amount):>12}")
    lines.append(f"  {'Total':<16} {fmt(burden.total):>12}  ({burden.effective_rate:.1%} effective)")
    if burden.total > 0:
        bracket = marginal_rate(result.annual_income, tables.federal_brackets)
        lines.append(f"  Federal bracket: {bracket:.0%}")
    return "\n".join(lines)


def payment_summary(result: AffordabilityResult) -> str:
    """Price, loan and monthly payment breakdown."""
    title = "Maximum home price" if result.mode == "maximize" else "Home price"
    verdict = "affordable" if result.is_affordable else "not affordable"
    tier = TIER_LABELS[result.affordability_tier]
    lines = [
        f"{title}: {fmt(result.home_price)}",
        f"  Down payment:    {fmt(result.down_payment_amount)} ({result.down_payment_percent:.1f}%)",
        f"  Loan amount:     {fmt(result.loan_amount)} ({result.term_years}yr at {result.interest_rate:.2f}%)",
        "",
        "Monthly payment:",
        f"  Principal & int. {fmt(result.monthly_principal_and_interest):>12}",
        f"  Property tax     {fmt(result.monthly_property_tax):>12}  ({result.property_tax_rate:.2%}/yr)",
        f"  Insurance        {fmt(result.monthly_insurance):>12}",
        f"  Mortgage ins.    {fmt(result.monthly_mortgage_insurance):>12}",
        f"  Total            {fmt(result.total_monthly_payment):>12}",
        "",
        f"  Gross income:    {fmt(result.monthly_gross_income)}/month "
        f"({result.percent_of_gross_income:.1f}% to housing)",
        f"  Take-home:       {fmt(result.monthly_net_income)}/month "
        f"({result.percent_of_net_income:.1f}% to housing)",
        f"  Verdict:         {tier}, {verdict}",
    ]
    return "\n".join(lines)


def term_table(result: AffordabilityResult) -> str:
    """Compare the same loan across standard terms."""
    header = (
        f"{'Term':>5} | {'Rate':>6} | {'P&I':>10} | {'Total':>10} | "
        f"{'Interest':>12} | {'% Gross':>7} | {'% Net':>6} | {'Tier':>6}"
    )
    sep = "-" * len(header)
    lines = ["Payment by loan term:", header, sep]

    for term, opt in sorted(result.term_options.items()):
        lines.append(
            f"{term:>4}y | {opt.interest_rate:>5.2f}% | {fmt(opt.payment):>10} | "
            f"{fmt(opt.total_payment):>10} | {fmt(opt.total_interest):>12} | "
            f"{opt.percent_of_gross_income:>6.1f}% | {opt.percent_of_net_income:>5.1f}% | "
            f"{opt.affordability_tier:>6}"
        )

    return "\n".join(lines)


def to_csv(result: AffordabilityResult) -> str:
    """Export the term comparison to a CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "term_years", "interest_rate", "payment", "total_payment", "total_interest",
        "percent_of_gross_income", "percent_of_net_income", "affordability_tier",
    ])
    for term, opt in sorted(result.term_options.items()):
        writer.writerow([
            term, f"{opt.interest_rate:.3f}", f"{opt.payment:.2f}",
            f"{opt.total_payment:.2f}", f"{opt.total_interest:.2f}",
            f"{opt.percent_of_gross_income:.2f}", f"{opt.percent_of_net_income:.2f}",
            opt.affordability_tier,
        ])
    return output.getvalue()


def term_dataframe(result: AffordabilityResult) -> pd.DataFrame:
    """Term comparison as a DataFrame indexed by term."""
    rows = []
    for term, opt in sorted(result.term_options.items()):
        rows.append(
            {
                "Term": term,
                "Rate": opt.interest_rate,
                "P&I": opt.payment,
                "Total Payment": opt.total_payment,
                "Total Interest": opt.total_interest,
                "% Gross": opt.percent_of_gross_income,
                "% Net": opt.percent_of_net_income,
                "Tier": opt.affordability_tier,
            }
        )
    return pd.DataFrame(rows).set_index("Term")


def full_report(
    result: AffordabilityResult,
    params: ScenarioParams,
    tables: RateTables = DEFAULT_TABLES,
) -> str:
    """Generate a complete summary report."""
    parts = [
        summary_header(params),
        payment_summary(result),
        "",
        tax_table(result, tables),
        "",
        term_table(result),
    ]
    return "\n".join(parts)
