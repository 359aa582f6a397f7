"""CLI entry point for the home affordability calculator."""

import argparse
import json
import logging
import sys
from dataclasses import replace

import yaml

from homeafford.affordability import InsufficientIncomeError, solve
from homeafford.config import load_config, load_rate_tables, params_to_dict, result_to_dict
from homeafford.local_tax import jurisdiction_label, jurisdictions_for
from homeafford.output import full_report, to_csv
from homeafford.params import (
    DownPayment,
    IncomeSpec,
    Jurisdiction,
    ScenarioParams,
    TakeHomeIncome,
)
from homeafford.sensitivity import format_sweep, frange, sweep
from homeafford.tax_data import DEFAULT_TABLES, canonical_state
from homeafford.validate import ValidationError, validate_scenario

logger = logging.getLogger(__name__)


def _load_params(args: argparse.Namespace) -> ScenarioParams:
    """Config file (or defaults) with command-line overrides applied."""
    params = load_config(args.config) if args.config else ScenarioParams()

    if args.take_home is not None:
        params = replace(params, income=TakeHomeIncome(args.take_home))
    elif args.income is not None or args.frequency is not None:
        base = params.income if isinstance(params.income, IncomeSpec) else IncomeSpec()
        params = replace(params, income=replace(
            base,
            amount=base.amount if args.income is None else args.income,
            frequency=args.frequency or base.frequency,
        ))

    if args.state is not None or args.subdivision is not None:
        params = replace(params, jurisdiction=Jurisdiction(
            state=args.state or params.jurisdiction.state,
            subdivision=args.subdivision,
        ))

    loan = params.loan
    if args.down_pct is not None:
        loan = replace(loan, down_payment=DownPayment.percent_of(args.down_pct))
    elif args.down_amount is not None:
        loan = replace(loan, down_payment=DownPayment.fixed(args.down_amount))
    if args.rate is not None:
        loan = replace(loan, interest_rate=args.rate)
    if args.term is not None:
        loan = replace(loan, term_years=args.term)
    if args.command == "afford":
        loan = replace(loan, home_price=None)
    elif getattr(args, "price", None) is not None:
        loan = replace(loan, home_price=args.price)
    params = replace(params, loan=loan)

    extras = params.extras
    if args.debts is not None:
        extras = replace(extras, monthly_debts=args.debts)
    if args.fha:
        extras = replace(extras, fha=True)
    return replace(params, extras=extras)


def _load_tables(args: argparse.Namespace):
    if args.tables:
        logger.info("Loading rate tables from %s", args.tables)
        return load_rate_tables(args.tables)
    return DEFAULT_TABLES


def cmd_solve(args: argparse.Namespace) -> None:
    """Find the maximum price, or evaluate ``--price``/``evaluate PRICE``."""
    tables = _load_tables(args)
    params = _load_params(args)
    validate_scenario(params)

    result = solve(params, tables)

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    elif args.csv:
        print(to_csv(result), end="")
    else:
        print(full_report(result, params, tables))


def cmd_jurisdictions(args: argparse.Namespace) -> None:
    """List local tax subdivisions for a state."""
    tables = _load_tables(args)
    state = canonical_state(args.state)
    if state is None:
        raise ValidationError(f"Unknown state '{args.state}'")

    names = jurisdictions_for(state, tables)
    if not names:
        print(f"{state} has no local income tax.")
        return
    print(f"{jurisdiction_label(state, tables)} options for {state}:")
    for name in names:
        print(f"  {name}")


def cmd_sensitivity(args: argparse.Namespace) -> None:
    """Run sensitivity analysis on a parameter."""
    tables = _load_tables(args)
    params = _load_params(args)
    validate_scenario(params)

    parts = args.range.split(",")
    if len(parts) != 3:
        print("Error: --range must be start,stop,step (e.g., 5,8,0.5)", file=sys.stderr)
        sys.exit(1)

    start, stop, step = float(parts[0]), float(parts[1]), float(parts[2])
    values = frange(start, stop, step)

    is_pct = any(kw in args.param for kw in ["rate", "percent"])

    results = sweep(params, args.param, values, tables)
    print(format_sweep(args.param, results, is_percentage=is_pct))


def cmd_defaults(args: argparse.Namespace) -> None:
    """Print default parameters as YAML."""
    print(yaml.dump(params_to_dict(ScenarioParams()), default_flow_style=False, sort_keys=False))


def _add_scenario_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tables", help="YAML/JSON rate-table overrides")
    parser.add_argument("--income", type=float, help="Gross pay per period")
    parser.add_argument(
        "--frequency", choices=["hourly", "weekly", "biweekly", "monthly", "annual"],
        help="Pay period for --income",
    )
    parser.add_argument("--take-home", type=float, help="Monthly take-home pay (skips tax calculation)")
    parser.add_argument("--state", help="State name or postal code")
    parser.add_argument("--subdivision", help="County/city/school district for local tax")
    down = parser.add_mutually_exclusive_group()
    down.add_argument("--down-pct", type=float, help="Down payment, percent of price")
    down.add_argument("--down-amount", type=float, help="Down payment, dollars")
    down.add_argument("--fha", action="store_true", help="FHA loan: 3.5%% down locked, MIP added")
    parser.add_argument("--rate", type=float, help="Interest rate, %% p.a.")
    parser.add_argument("--term", type=int, choices=[10, 15, 30], help="Loan term in years")
    parser.add_argument("--debts", type=float, help="Other monthly debt payments")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="How much home can you afford? US tax-aware affordability calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  homeafford afford --income 120000 --state TX          # Maximum home price
  homeafford afford config.yaml --json                  # JSON result
  homeafford evaluate 400000 --down-amount 40000        # Check a specific price
  homeafford jurisdictions Ohio                         # Local tax options
  homeafford sensitivity --param loan.interest_rate --range 5,8,0.5
  homeafford defaults                                   # Print default config
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log data gaps and solver steps")

    subparsers = parser.add_subparsers(dest="command")

    # afford
    afford_parser = subparsers.add_parser("afford", help="Maximum affordable home price")
    afford_parser.add_argument("config", nargs="?", help="YAML/JSON scenario file")
    _add_scenario_args(afford_parser)
    afford_parser.add_argument("--json", action="store_true", help="Output as JSON")
    afford_parser.add_argument("--csv", action="store_true", help="Term comparison as CSV")

    # evaluate
    eval_parser = subparsers.add_parser("evaluate", help="Evaluate a specific home price")
    eval_parser.add_argument("price", type=float, help="Home price")
    eval_parser.add_argument("config", nargs="?", help="YAML/JSON scenario file")
    _add_scenario_args(eval_parser)
    eval_parser.add_argument("--json", action="store_true", help="Output as JSON")
    eval_parser.add_argument("--csv", action="store_true", help="Term comparison as CSV")

    # jurisdictions
    jur_parser = subparsers.add_parser("jurisdictions", help="List local tax subdivisions")
    jur_parser.add_argument("state", help="State name or postal code")
    jur_parser.add_argument("--tables", help="YAML/JSON rate-table overrides")

    # sensitivity
    sens_parser = subparsers.add_parser("sensitivity", help="Parameter sensitivity analysis")
    sens_parser.add_argument("--config", help="Base scenario file")
    _add_scenario_args(sens_parser)
    sens_parser.add_argument("--param", required=True, help="Parameter path (e.g., loan.interest_rate)")
    sens_parser.add_argument("--range", required=True, help="start,stop,step (e.g., 5,8,0.5)")

    # defaults
    subparsers.add_parser("defaults", help="Print default parameters")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "afford": cmd_solve,
        "evaluate": cmd_solve,
        "jurisdictions": cmd_jurisdictions,
        "sensitivity": cmd_sensitivity,
        "defaults": cmd_defaults,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args)
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except InsufficientIncomeError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
