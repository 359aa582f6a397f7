"""Tests for local income tax rules and the state strategy registry."""

import logging
from dataclasses import replace

import pytest
from homeafford.local_tax import (
    LOCAL_TAX_STRATEGIES,
    has_local_tax,
    jurisdiction_label,
    jurisdictions_for,
    local_tax,
)
from homeafford.tax_data import (
    DEFAULT_TABLES,
    STATE_ABBREVIATIONS,
    FixedAmount,
    FlatRate,
    LocalTaxTable,
    RangeRate,
    TableBased,
)


class TestNoLocalTax:
    @pytest.mark.parametrize("state", ["Texas", "California", "Florida", "Washington"])
    def test_states_without_local_tax(self, state):
        assert local_tax(100_000, state, "Anything") == 0.0
        assert not has_local_tax(state)

    def test_every_undeclared_state_is_zero(self):
        for state in STATE_ABBREVIATIONS.values():
            if state not in DEFAULT_TABLES.local_tax:
                assert local_tax(250_000, state, "Capital City") == 0.0

    def test_empty_subdivision(self):
        assert local_tax(100_000, "Ohio", "") == 0.0
        assert local_tax(100_000, "Ohio", None) == 0.0

    def test_unknown_subdivision_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="homeafford.local_tax"):
            assert local_tax(100_000, "Ohio", "Springfield") == 0.0
        assert "Springfield" in caplog.text

    def test_unknown_state(self):
        assert local_tax(100_000, "Atlantis", "Columbus") == 0.0


class TestRuleShapes:
    def test_flat_rate(self):
        assert local_tax(100_000, "Ohio", "Columbus") == pytest.approx(2_500)

    def test_range_uses_midpoint(self):
        # Allegheny: 1% - 3%
        assert local_tax(100_000, "Pennsylvania", "Allegheny") == pytest.approx(2_000)

    def test_range_degenerate(self):
        assert local_tax(100_000, "Pennsylvania", "Philadelphia") == pytest.approx(3_750)

    def test_fixed_amount_ignores_income(self):
        assert local_tax(40_000, "West Virginia", "Charleston") == 156.0
        assert local_tax(400_000, "West Virginia", "Charleston") == 156.0
        assert local_tax(100_000, "Colorado", "Denver") == 69.0

    def test_postal_code(self):
        assert local_tax(100_000, "IN", "Marion") == pytest.approx(2_020)

    def test_range_rate_property(self):
        assert RangeRate(0.01, 0.03).rate == pytest.approx(0.02)


class TestStrategies:
    def test_michigan_exemption(self):
        assert local_tax(100_000, "Michigan", "Detroit") == pytest.approx((100_000 - 600) * 0.024)

    def test_michigan_income_below_exemption(self):
        assert local_tax(500, "Michigan", "Detroit") == 0.0

    def test_michigan_other(self):
        assert local_tax(100_000, "Michigan", "Other") == 0.0

    def test_nyc_brackets(self):
        expected = 12_000 * 0.03078 + 13_000 * 0.03762 + 25_000 * 0.03819 + 50_000 * 0.03876
        assert local_tax(100_000, "New York", "New York City") == pytest.approx(expected)

    def test_yonkers_surcharge_on_state_tax(self):
        state_tax = 100_000 * 0.065
        assert local_tax(100_000, "New York", "Yonkers") == pytest.approx(state_tax * 0.1675)

    def test_oregon_portland_high_income(self):
        expected = (
            300_000 * 0.001
            + 175_000 * 0.01
            + 175_000 * 0.015
            + 50_000 * 0.015
            + 35
        )
        assert local_tax(300_000, "Oregon", "Portland (Multnomah County)") == pytest.approx(expected)

    def test_oregon_portland_below_thresholds(self):
        assert local_tax(100_000, "Oregon", "Portland (Multnomah County)") == pytest.approx(135)

    def test_oregon_transit_only(self):
        assert local_tax(100_000, "Oregon", "Other") == pytest.approx(100)

    def test_iowa_surtax_on_state_tax(self):
        assert local_tax(100_000, "Iowa", "Des Moines Independent") == pytest.approx(
            100_000 * 0.038 * 0.04
        )

    def test_registered_strategies(self):
        assert {"Michigan", "New York", "Oregon", "Iowa"} <= set(LOCAL_TAX_STRATEGIES)

    def test_new_state_strategy(self, monkeypatch):
        tables = replace(
            DEFAULT_TABLES,
            local_tax={"Texas": LocalTaxTable("city", {"Austin": TableBased({"fee": 50})})},
        )
        monkeypatch.setitem(
            LOCAL_TAX_STRATEGIES, "Texas", lambda income, params, rate: params["fee"] + income * 0.001
        )
        assert local_tax(100_000, "Texas", "Austin", tables) == pytest.approx(150)

    def test_missing_strategy_is_zero(self, caplog):
        tables = replace(
            DEFAULT_TABLES,
            local_tax={"Texas": LocalTaxTable("city", {"Austin": TableBased({"fee": 50})})},
        )
        with caplog.at_level(logging.WARNING, logger="homeafford.local_tax"):
            assert local_tax(100_000, "Texas", "Austin", tables) == 0.0
        assert "strategy" in caplog.text


class TestLocalTaxTable:
    def test_single_shape(self):
        table = LocalTaxTable("city", {"A": FlatRate(0.01), "B": FlatRate(0.02)})
        assert table.shape == "flat"

    def test_mixed_shapes_rejected(self):
        with pytest.raises(ValueError, match="Mixed"):
            LocalTaxTable("city", {"A": FlatRate(0.01), "B": FixedAmount(50)})

    def test_empty_table(self):
        assert LocalTaxTable("city", {}).shape is None

    def test_default_table_shapes(self):
        shapes = {state: table.shape for state, table in DEFAULT_TABLES.local_tax.items()}
        assert shapes["Pennsylvania"] == "range"
        assert shapes["West Virginia"] == "fixed"
        assert shapes["Oregon"] == "table"
        assert shapes["Indiana"] == "flat"


class TestJurisdictions:
    def test_ohio_in_table_order(self):
        names = jurisdictions_for("Ohio")
        assert names[0] == "Akron"
        assert "Columbus" in names

    def test_pennsylvania_philadelphia_first(self):
        names = jurisdictions_for("PA")
        assert names[0] == "Philadelphia"
        assert names[-1] == "Other"

    def test_no_local_tax(self):
        assert jurisdictions_for("Texas") == []
        assert jurisdictions_for(None) == []
        assert jurisdictions_for("Atlantis") == []

    def test_labels(self):
        assert jurisdiction_label("Indiana") == "County"
        assert jurisdiction_label("Ohio") == "City/Municipality"
        assert jurisdiction_label("Iowa") == "School District"
        assert jurisdiction_label("Pennsylvania") == "City/County"
        assert jurisdiction_label("Oregon") == "Municipality/City"
        assert jurisdiction_label("Texas") == "Municipality/City"
