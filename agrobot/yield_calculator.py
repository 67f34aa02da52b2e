"""Sugarcane yield prediction.

One calculator serves both the web form (`predict`) and the WhatsApp
`yield <district> <area> <soil>` command (`parse_yield_command`).
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real

from agrobot.errors import InvalidInput
from agrobot.localization import YIELD_REPLY, YIELD_USAGE_INVALID, YIELD_USAGE_MISSING

HECTARE_FACTOR = Decimal("2.47")

# Quintals per acre for each soil texture.
SOIL_MULTIPLIERS = {
    "alluvial": Decimal("90"),
    "clayloam": Decimal("75"),
    "sandy": Decimal("65"),
    "sandyloam": Decimal("65"),
    "loam": Decimal("85"),
    "clayey": Decimal("60"),
}
DEFAULT_SOIL_MULTIPLIER = Decimal("70")

DISTRICT_FACTORS = {
    "lucknow": Decimal("1.15"),
    "kanpur": Decimal("1.05"),
    "meerut": Decimal("1.25"),
    "bareilly": Decimal("1.15"),
    "moradabad": Decimal("1.1"),
    "aligarh": Decimal("1.05"),
    "saharanpur": Decimal("1.2"),
    "gorakhpur": Decimal("1.1"),
    "faizabad": Decimal("1.05"),
    "jhansi": Decimal("0.95"),
}
DEFAULT_DISTRICT_FACTOR = Decimal("1.0")

IRRIGATION_FACTORS = {
    "full": Decimal("1.0"),
    "partial": Decimal("0.8"),
    "rain-fed": Decimal("0.6"),
}
DEFAULT_IRRIGATION_FACTOR = Decimal("0.8")

AREA_UNITS = ("acre", "hectare")

_SOIL_KEY_RE = re.compile(r"[\s_\-]+")
_AREA_TOKEN_RE = re.compile(r"^(\d+(?:\.\d+)?)(acres?|hectares?|ha)?$")


def soil_key(soil_type):
    return _SOIL_KEY_RE.sub("", (soil_type or "").strip().lower())


def district_key(district):
    return (district or "").strip().lower()


def _validate_area(area):
    if isinstance(area, bool) or not isinstance(area, Real):
        raise InvalidInput(f"Area must be a number, got {area!r}")
    if not math.isfinite(area) or area < 0:
        raise InvalidInput(f"Area must be a finite non-negative number, got {area!r}")
    return Decimal(str(area))


def _validate_unit(unit):
    normalized = (unit or "").strip().lower()
    if normalized not in AREA_UNITS:
        raise InvalidInput(f"Area unit must be one of {AREA_UNITS}, got {unit!r}")
    return normalized


def predict(district, area, unit="acre", soil_type="", irrigation="full"):
    """Predict total yield in quintals.

    Unknown districts, soils and irrigation levels fall back to neutral
    factors instead of failing; only the area and its unit are validated.
    The product is evaluated in decimal so that x.5 always rounds up.
    """
    area_value = _validate_area(area)
    area_factor = HECTARE_FACTOR if _validate_unit(unit) == "hectare" else Decimal("1")

    soil_value = SOIL_MULTIPLIERS.get(soil_key(soil_type), DEFAULT_SOIL_MULTIPLIER)
    district_value = DISTRICT_FACTORS.get(district_key(district), DEFAULT_DISTRICT_FACTOR)
    irrigation_value = IRRIGATION_FACTORS.get((irrigation or "").strip().lower(), DEFAULT_IRRIGATION_FACTOR)

    total = soil_value * district_value * irrigation_value * area_value * area_factor
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class YieldCommand:
    district: str
    area: float
    unit: str
    soil_type: str

    def predict(self):
        # The command has no irrigation input; it assumes full irrigation.
        return predict(self.district, self.area, self.unit, self.soil_type, "full")


def parse_yield_command(text):
    """Parse `yield <district> <area[unit]> <soil>`; raise InvalidInput otherwise.

    The error message is the usage string to send back to the farmer.
    """
    tokens = (text or "").strip().lower().split()
    if not tokens or tokens[0] != "yield":
        raise InvalidInput(YIELD_USAGE_INVALID)

    parts = tokens[1:]
    if len(parts) != 3:
        raise InvalidInput(YIELD_USAGE_MISSING)

    district, area_token, soil_type = parts
    match = _AREA_TOKEN_RE.match(area_token)
    if not match:
        raise InvalidInput(YIELD_USAGE_INVALID)
    if soil_key(soil_type) not in SOIL_MULTIPLIERS or district_key(district) not in DISTRICT_FACTORS:
        raise InvalidInput(YIELD_USAGE_INVALID)

    suffix = match.group(2) or "acre"
    unit = "hectare" if suffix.startswith("h") else "acre"
    return YieldCommand(district=district, area=float(match.group(1)), unit=unit, soil_type=soil_type)


def yield_command_reply(text):
    try:
        command = parse_yield_command(text)
    except InvalidInput as exc:
        return str(exc)
    return YIELD_REPLY.format(quintals=command.predict())
