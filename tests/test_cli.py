"""Smoke tests for the command-line interface."""

import json

import pytest
import yaml
from homeafford.cli import main


def _run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr()


class TestAfford:
    def test_report(self, capsys):
        out = _run(capsys, "afford", "--income", "120000", "--state", "TX").out
        assert "Maximum home price" in out
        assert "Payment by loan term:" in out

    def test_json(self, capsys):
        out = _run(capsys, "afford", "--income", "120000", "--state", "TX", "--json").out
        data = json.loads(out)
        assert data["mode"] == "maximize"
        assert data["home_price"] > 0

    def test_config_file(self, capsys, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text("income:\n  amount: 8000\n  frequency: monthly\njurisdiction:\n  state: Ohio\n")
        data = json.loads(_run(capsys, "afford", str(path), "--json").out)
        assert data["annual_income"] == 96_000

    def test_take_home(self, capsys):
        data = json.loads(_run(capsys, "afford", "--take-home", "5000", "--json").out)
        assert data["monthly_gross_income"] == pytest.approx(6_500)

    def test_fha(self, capsys):
        data = json.loads(_run(capsys, "afford", "--income", "120000", "--fha", "--json").out)
        assert data["down_payment_percent"] == 3.5
        assert data["monthly_mortgage_insurance"] > 0

    def test_insufficient_income_exit_code(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["afford", "--income", "1000", "--state", "TX"])
        assert exc.value.code == 2
        assert "too high relative to your income" in capsys.readouterr().err

    def test_invalid_input_exit_code(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["afford", "--income", "-5", "--state", "TX"])
        assert exc.value.code == 1
        assert "valid income" in capsys.readouterr().err

    def test_unknown_state(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["afford", "--state", "Atlantis"])
        assert exc.value.code == 1

    def test_non_numeric_config_value(self, capsys, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text("extras:\n  custom_property_tax_rate: '2.8%'\n")
        with pytest.raises(SystemExit) as exc:
            main(["afford", str(path)])
        assert exc.value.code == 1
        assert "property tax rate" in capsys.readouterr().err

    def test_gapped_rate_table(self, capsys, tmp_path):
        path = tmp_path / "rates.yaml"
        path.write_text(
            "federal_brackets:\n"
            "  - {min: 0, max: 50000, rate: 0.1}\n"
            "  - {min: 60000, max: null, rate: 0.2}\n"
        )
        with pytest.raises(SystemExit) as exc:
            main(["afford", "--income", "120000", "--tables", str(path)])
        assert exc.value.code == 1
        assert "contiguous" in capsys.readouterr().err

    def test_fha_excludes_custom_down_payment(self, capsys):
        with pytest.raises(SystemExit):
            main(["afford", "--fha", "--down-pct", "10"])
        assert "not allowed with argument" in capsys.readouterr().err

    def test_fha_with_config_down_payment(self, capsys, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text("loan:\n  down_payment:\n    mode: percent\n    percent: 10\n")
        with pytest.raises(SystemExit) as exc:
            main(["afford", str(path), "--fha"])
        assert exc.value.code == 1
        assert "FHA" in capsys.readouterr().err


class TestEvaluate:
    def test_json(self, capsys):
        out = _run(
            capsys, "evaluate", "400000", "--income", "120000", "--state", "TX",
            "--down-amount", "40000", "--rate", "6.5", "--json",
        ).out
        data = json.loads(out)
        assert data["mode"] == "evaluate"
        assert data["loan_amount"] == 360_000
        assert data["affordability_tier"] == "red"
        assert data["is_affordable"] is False

    def test_csv(self, capsys):
        out = _run(capsys, "evaluate", "300000", "--csv").out
        lines = out.strip().splitlines()
        assert lines[0].startswith("term_years,")
        assert len(lines) == 4

    def test_down_payment_exceeds_price(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["evaluate", "100000", "--down-amount", "150000"])
        assert exc.value.code == 1


class TestOtherCommands:
    def test_jurisdictions(self, capsys):
        out = _run(capsys, "jurisdictions", "OH").out
        assert out.startswith("City/Municipality options for Ohio:")
        assert "  Columbus" in out

    def test_jurisdictions_none(self, capsys):
        assert "no local income tax" in _run(capsys, "jurisdictions", "Texas").out

    def test_jurisdictions_unknown_state(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["jurisdictions", "Atlantis"])
        assert exc.value.code == 1

    def test_sensitivity(self, capsys):
        out = _run(
            capsys, "sensitivity", "--param", "loan.interest_rate", "--range", "5,7,1",
            "--income", "120000",
        ).out
        assert out.startswith("Sensitivity: loan.interest_rate")
        assert "5.00%" in out and "7.00%" in out

    def test_sensitivity_unknown_parameter(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["sensitivity", "--param", "loan.apr", "--range", "5,7,1"])
        assert exc.value.code == 1
        assert "Unknown parameter 'apr'" in capsys.readouterr().err

    def test_sensitivity_invalid_values_reported(self, capsys):
        out = _run(
            capsys, "sensitivity", "--param", "loan.down_payment.percent", "--range", "90,110,20",
        ).out
        assert "invalid: Down payment must be between 0% and 100%." in out

    def test_sensitivity_bad_range(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["sensitivity", "--param", "loan.interest_rate", "--range", "5,7"])
        assert exc.value.code == 1

    def test_defaults(self, capsys):
        data = yaml.safe_load(_run(capsys, "defaults").out)
        assert data["income"] == {"amount": 100_000, "frequency": "annual"}
        assert data["loan"]["term_years"] == 30

    def test_no_command_prints_help(self, capsys):
        assert "usage" in _run(capsys).out
