"""Tests for report formatting."""

import csv
import io

import pytest
from homeafford.affordability import solve
from homeafford.output import (
    fmt,
    full_report,
    payment_summary,
    summary_header,
    tax_table,
    term_dataframe,
    term_table,
    to_csv,
)
from homeafford.params import (
    FinancialExtras,
    IncomeSpec,
    Jurisdiction,
    LoanTerms,
    ScenarioParams,
    TakeHomeIncome,
)


@pytest.fixture
def params():
    return ScenarioParams(
        income=IncomeSpec(120_000),
        jurisdiction=Jurisdiction("Ohio", "Columbus"),
        loan=LoanTerms(home_price=400_000),
    )


@pytest.fixture
def result(params):
    return solve(params)


class TestFmt:
    def test_dollars(self):
        assert fmt(1_234.4) == "$1,234"

    def test_millions(self):
        assert fmt(2_500_000) == "$2.50M"


class TestReport:
    def test_header(self, params):
        text = summary_header(params)
        assert "Columbus, Ohio" in text
        assert "$120,000 (annual)" in text
        assert "20.0%" in text
        assert "FHA" not in text

    def test_header_take_home_and_fha(self):
        params = ScenarioParams(
            income=TakeHomeIncome(5_000), extras=FinancialExtras(fha=True)
        )
        text = summary_header(params)
        assert "Take-home pay" in text
        assert "FHA loan" in text

    def test_payment_summary(self, result):
        text = payment_summary(result)
        assert text.startswith("Home price: $400,000")
        assert "Loan amount:     $320,000" in text

    def test_maximize_title(self):
        text = payment_summary(solve(ScenarioParams()))
        assert text.startswith("Maximum home price")

    def test_tax_table(self, result):
        text = tax_table(result)
        assert "Local" in text
        assert "$3,000" in text
        assert "Federal bracket: 24%" in text

    def test_term_table(self, result):
        lines = term_table(result).splitlines()
        assert lines[0] == "Payment by loan term:"
        assert len(lines) == 3 + 3

    def test_full_report(self, result, params):
        text = full_report(result, params)
        assert "Home Affordability" in text
        assert "Taxes (annual):" in text
        assert "Payment by loan term:" in text


class TestExports:
    def test_csv(self, result):
        rows = list(csv.reader(io.StringIO(to_csv(result))))
        assert rows[0][0] == "term_years"
        assert [row[0] for row in rows[1:]] == ["10", "15", "30"]
        assert rows[3][1] == "6.500"

    def test_dataframe(self, result):
        df = term_dataframe(result)
        assert list(df.index) == [10, 15, 30]
        assert df.loc[30, "Rate"] == 6.5
        assert df.loc[10, "P&I"] > df.loc[30, "P&I"]
