"""US tax and housing-cost reference data (2024 tax year).

Everything the engine reads lives here as immutable data. ``DEFAULT_TABLES``
bundles the defaults; ``homeafford.config.load_rate_tables`` overlays a
YAML/JSON file on top of them for other tax years or local data.
"""

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Table types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Bracket:
    """One marginal bracket: income in (min, max] is taxed at ``rate``."""

    min: float
    max: float
    rate: float


@dataclass(frozen=True)
class PayrollConstants:
    """FICA parameters for one tax year."""

    social_security_rate: float = 0.062
    medicare_rate: float = 0.0145
    surcharge_rate: float = 0.009  # additional Medicare tax
    wage_cap: float = 168_600
    surcharge_threshold: float = 200_000


@dataclass(frozen=True)
class FlatRate:
    rate: float


@dataclass(frozen=True)
class RangeRate:
    """Authorised rate range; taxed at the midpoint (an approximation)."""

    min_rate: float
    max_rate: float

    @property
    def rate(self) -> float:
        return (self.min_rate + self.max_rate) / 2


@dataclass(frozen=True)
class FixedAmount:
    """Flat annual dollar amount per resident, independent of income."""

    amount: float


@dataclass(frozen=True)
class TableBased:
    """Parameters handed to the state's registered local-tax strategy."""

    params: dict[str, Any] = field(default_factory=dict)


LocalTaxRule = FlatRate | RangeRate | FixedAmount | TableBased

RULE_SHAPES = {
    FlatRate: "flat",
    RangeRate: "range",
    FixedAmount: "fixed",
    TableBased: "table",
}


@dataclass(frozen=True)
class LocalTaxTable:
    """Local-tax rules for one state, keyed by subdivision name.

    A state uses a single rule shape; only the per-subdivision values vary.
    """

    tax_type: str  # county | city | school_district | both | table_based
    subdivisions: dict[str, LocalTaxRule]

    def __post_init__(self):
        shapes = {RULE_SHAPES[type(rule)] for rule in self.subdivisions.values()}
        if len(shapes) > 1:
            raise ValueError(f"Mixed local tax rule shapes in one state: {sorted(shapes)}")

    @property
    def shape(self) -> str | None:
        for rule in self.subdivisions.values():
            return RULE_SHAPES[type(rule)]
        return None


def check_brackets(brackets: list[Bracket]) -> None:
    """Raise ValueError unless brackets start at 0, are contiguous and end at inf."""
    if not brackets:
        raise ValueError("Bracket schedule is empty")
    if brackets[0].min != 0:
        raise ValueError(f"First bracket must start at 0, got {brackets[0].min}")
    for lower, upper in zip(brackets, brackets[1:]):
        if lower.max != upper.min:
            raise ValueError(
                f"Brackets are not contiguous: {lower.max} != {upper.min}"
            )
    if brackets[-1].max != float("inf"):
        raise ValueError("Last bracket must be open-ended (max = inf)")


@dataclass(frozen=True)
class RateTables:
    """Read-only data source consumed by the tax and affordability engine."""

    federal_brackets: list[Bracket]
    payroll: PayrollConstants
    state_rates: dict[str, float]
    local_tax: dict[str, LocalTaxTable]
    property_tax_rates: dict[str, dict[str, float]]
    default_property_tax_rate: float
    default_interest_rates: dict[int, float]

    def __post_init__(self):
        check_brackets(self.federal_brackets)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------

STATE_ABBREVIATIONS = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming",
}

_STATES_BY_KEY = {name.lower(): name for name in STATE_ABBREVIATIONS.values()}
_STATES_BY_KEY.update({abbr.lower(): name for abbr, name in STATE_ABBREVIATIONS.items()})


def canonical_state(state: str | None) -> str | None:
    """Map 'texas', 'TX' or 'Texas' to 'Texas'; None for anything else."""
    if not state:
        return None
    return _STATES_BY_KEY.get(state.strip().lower())


# ---------------------------------------------------------------------------
# Federal income tax and FICA (2024, single filer)
# ---------------------------------------------------------------------------

FEDERAL_BRACKETS_2024 = [
    Bracket(0, 11_600, 0.10),
    Bracket(11_600, 47_150, 0.12),
    Bracket(47_150, 100_525, 0.22),
    Bracket(100_525, 191_950, 0.24),
    Bracket(191_950, 243_725, 0.32),
    Bracket(243_725, 609_350, 0.35),
    Bracket(609_350, float("inf"), 0.37),
]

PAYROLL_2024 = PayrollConstants()

# Simplified flat state rates (top marginal rate, or the flat rate where one exists)
STATE_TAX_RATES = {
    "Alabama": 0.05,
    "Alaska": 0.00,
    "Arizona": 0.025,
    "Arkansas": 0.039,
    "California": 0.095,
    "Colorado": 0.044,
    "Connecticut": 0.0699,
    "Delaware": 0.066,
    "Florida": 0.00,
    "Georgia": 0.0539,
    "Hawaii": 0.11,
    "Idaho": 0.059,
    "Illinois": 0.049,
    "Indiana": 0.03,
    "Iowa": 0.038,
    "Kansas": 0.055,
    "Kentucky": 0.04,
    "Louisiana": 0.03,
    "Maine": 0.071,
    "Maryland": 0.057,
    "Massachusetts": 0.09,
    "Michigan": 0.042,
    "Minnesota": 0.098,
    "Mississippi": 0.044,
    "Missouri": 0.047,
    "Montana": 0.059,
    "Nebraska": 0.052,
    "Nevada": 0.00,
    "New Hampshire": 0.05,
    "New Jersey": 0.057,
    "New Mexico": 0.059,
    "New York": 0.065,
    "North Carolina": 0.0425,
    "North Dakota": 0.025,
    "Ohio": 0.035,
    "Oklahoma": 0.0475,
    "Oregon": 0.099,
    "Pennsylvania": 0.0307,
    "Rhode Island": 0.0599,
    "South Carolina": 0.062,
    "South Dakota": 0.00,
    "Tennessee": 0.00,
    "Texas": 0.00,
    "Utah": 0.0455,
    "Vermont": 0.0875,
    "Virginia": 0.0575,
    "Washington": 0.00,
    "West Virginia": 0.0482,
    "Wisconsin": 0.0765,
    "Wyoming": 0.00,
}


# ---------------------------------------------------------------------------
# Local income taxes
# ---------------------------------------------------------------------------

# Colorado occupational privilege taxes (employee share, annualised)
COLORADO_CITIES = {
    "Denver": FixedAmount(69.0),  # $5.75/month
    "Aurora": FixedAmount(24.0),
    "Glendale": FixedAmount(60.0),
    "Greenwood Village": FixedAmount(24.0),
    "Sheridan": FixedAmount(36.0),
}

INDIANA_COUNTIES = {
    "Allen": FlatRate(0.0159),
    "Elkhart": FlatRate(0.02),
    "Hamilton": FlatRate(0.011),
    "Hendricks": FlatRate(0.017),
    "Lake": FlatRate(0.015),
    "Marion": FlatRate(0.0202),
    "Monroe": FlatRate(0.01345),
    "St. Joseph": FlatRate(0.0175),
    "Tippecanoe": FlatRate(0.0128),
    "Vanderburgh": FlatRate(0.012),
}

# School district surtax, as a fraction of state income tax
IOWA_SCHOOL_DISTRICTS = {
    "Ames Community": TableBased({"surtax": 0.01}),
    "Cedar Rapids Community": TableBased({"surtax": 0.02}),
    "Davenport Community": TableBased({"surtax": 0.03}),
    "Des Moines Independent": TableBased({"surtax": 0.04}),
    "Iowa City Community": TableBased({"surtax": 0.0}),
    "Sioux City Community": TableBased({"surtax": 0.01}),
}

KENTUCKY_CITIES = {
    "Bowling Green": FlatRate(0.0185),
    "Covington": FlatRate(0.0245),
    "Frankfort": FlatRate(0.0175),
    "Lexington": FlatRate(0.0225),
    "Louisville": FlatRate(0.022),
    "Owensboro": FlatRate(0.0185),
}

MARYLAND_COUNTIES = {
    "Allegany": FlatRate(0.0305),
    "Anne Arundel": FlatRate(0.0281),
    "Baltimore City": FlatRate(0.032),
    "Baltimore County": FlatRate(0.032),
    "Frederick": FlatRate(0.0296),
    "Howard": FlatRate(0.032),
    "Montgomery": FlatRate(0.032),
    "Prince George's": FlatRate(0.032),
    "Talbot": FlatRate(0.024),
    "Worcester": FlatRate(0.0225),
}

# Resident rate applied above a per-person exemption
MICHIGAN_CITIES = {
    "Detroit": TableBased({"rate": 0.024, "exemption": 600}),
    "Grand Rapids": TableBased({"rate": 0.015, "exemption": 600}),
    "Highland Park": TableBased({"rate": 0.02, "exemption": 600}),
    "Saginaw": TableBased({"rate": 0.015, "exemption": 750}),
    "Battle Creek": TableBased({"rate": 0.01, "exemption": 750}),
    "Flint": TableBased({"rate": 0.01, "exemption": 600}),
    "Jackson": TableBased({"rate": 0.01, "exemption": 600}),
    "Lansing": TableBased({"rate": 0.01, "exemption": 600}),
    "Muskegon": TableBased({"rate": 0.01, "exemption": 600}),
    "Pontiac": TableBased({"rate": 0.01, "exemption": 600}),
    "Other": TableBased({"rate": 0.0, "exemption": 0}),
}

MISSOURI_CITIES = {
    "Kansas City": FlatRate(0.01),
    "St. Louis": FlatRate(0.01),
}

NEW_JERSEY_CITIES = {
    "Jersey City": FlatRate(0.01),
    "Newark": FlatRate(0.01),
}

NYC_BRACKETS = [
    Bracket(0, 12_000, 0.03078),
    Bracket(12_000, 25_000, 0.03762),
    Bracket(25_000, 50_000, 0.03819),
    Bracket(50_000, float("inf"), 0.03876),
]

NEW_YORK_CITIES = {
    "New York City": TableBased({"brackets": NYC_BRACKETS}),
    "Yonkers": TableBased({"surcharge": 0.1675}),  # share of state tax
}

OHIO_MUNICIPALITIES = {
    "Akron": FlatRate(0.025),
    "Cincinnati": FlatRate(0.018),
    "Cleveland": FlatRate(0.025),
    "Columbus": FlatRate(0.025),
    "Dayton": FlatRate(0.025),
    "Toledo": FlatRate(0.025),
    "Youngstown": FlatRate(0.0275),
}

_OREGON_TRANSIT_RATE = 0.001
_METRO_SHS = {"threshold": 125_000, "rate": 0.01}

OREGON_DISTRICTS = {
    "Portland (Multnomah County)": TableBased({
        "transit_rate": _OREGON_TRANSIT_RATE,
        "surtaxes": [
            _METRO_SHS,
            {"threshold": 125_000, "rate": 0.015},  # Preschool for All
            {"threshold": 250_000, "rate": 0.015},
        ],
        "flat_fee": 35,  # arts tax
        "flat_fee_min_income": 1_000,
    }),
    "Metro (Clackamas/Washington County)": TableBased({
        "transit_rate": _OREGON_TRANSIT_RATE,
        "surtaxes": [_METRO_SHS],
    }),
    "Other": TableBased({"transit_rate": _OREGON_TRANSIT_RATE}),
}

# Earned income tax: municipal + school district share, as a range per county
PENNSYLVANIA_COUNTIES = {
    "Philadelphia": RangeRate(0.0375, 0.0375),
    "Allegheny": RangeRate(0.01, 0.03),
    "Berks": RangeRate(0.01, 0.036),
    "Bucks": RangeRate(0.005, 0.01),
    "Chester": RangeRate(0.005, 0.01),
    "Dauphin": RangeRate(0.005, 0.02),
    "Delaware": RangeRate(0.005, 0.02),
    "Erie": RangeRate(0.01, 0.0118),
    "Lackawanna": RangeRate(0.01, 0.034),
    "Lancaster": RangeRate(0.005, 0.017),
    "Montgomery": RangeRate(0.005, 0.01),
    "Other": RangeRate(0.01, 0.01),
}

# City service fees, annualised
WEST_VIRGINIA_CITIES = {
    "Charleston": FixedAmount(156.0),
    "Huntington": FixedAmount(156.0),
    "Morgantown": FixedAmount(156.0),
    "Parkersburg": FixedAmount(104.0),
    "Wheeling": FixedAmount(104.0),
}

LOCAL_TAX_TABLES = {
    "Colorado": LocalTaxTable("city", COLORADO_CITIES),
    "Indiana": LocalTaxTable("county", INDIANA_COUNTIES),
    "Iowa": LocalTaxTable("school_district", IOWA_SCHOOL_DISTRICTS),
    "Kentucky": LocalTaxTable("city", KENTUCKY_CITIES),
    "Maryland": LocalTaxTable("county", MARYLAND_COUNTIES),
    "Michigan": LocalTaxTable("city", MICHIGAN_CITIES),
    "Missouri": LocalTaxTable("city", MISSOURI_CITIES),
    "New Jersey": LocalTaxTable("city", NEW_JERSEY_CITIES),
    "New York": LocalTaxTable("city", NEW_YORK_CITIES),
    "Ohio": LocalTaxTable("city", OHIO_MUNICIPALITIES),
    "Oregon": LocalTaxTable("table_based", OREGON_DISTRICTS),
    "Pennsylvania": LocalTaxTable("both", PENNSYLVANIA_COUNTIES),
    "West Virginia": LocalTaxTable("city", WEST_VIRGINIA_CITIES),
}


# ---------------------------------------------------------------------------
# Housing costs
# ---------------------------------------------------------------------------

# Effective annual property tax rate by state and county
PROPERTY_TAX_RATES = {
    "California": {"Los Angeles": 0.0072, "San Diego": 0.0073, "Orange": 0.0067},
    "Florida": {"Miami-Dade": 0.0089, "Orange": 0.0089, "Hillsborough": 0.0093},
    "Illinois": {"Cook": 0.0196, "DuPage": 0.0187, "Lake": 0.0231},
    "New Jersey": {"Bergen": 0.0214, "Essex": 0.0242, "Hudson": 0.0175},
    "New York": {"Kings": 0.0067, "Westchester": 0.0162, "Erie": 0.0219},
    "Ohio": {"Cuyahoga": 0.0218, "Franklin": 0.0164, "Hamilton": 0.0177},
    "Pennsylvania": {"Allegheny": 0.0174, "Philadelphia": 0.0099},
    "Texas": {"Bexar": 0.0213, "Dallas": 0.0199, "Harris": 0.0203, "Travis": 0.0174},
}

DEFAULT_PROPERTY_TAX_RATE = 0.028

DEFAULT_INTEREST_RATES = {10: 5.84, 15: 5.96, 30: 6.5}


DEFAULT_TABLES = RateTables(
    federal_brackets=FEDERAL_BRACKETS_2024,
    payroll=PAYROLL_2024,
    state_rates=STATE_TAX_RATES,
    local_tax=LOCAL_TAX_TABLES,
    property_tax_rates=PROPERTY_TAX_RATES,
    default_property_tax_rate=DEFAULT_PROPERTY_TAX_RATE,
    default_interest_rates=DEFAULT_INTEREST_RATES,
)
