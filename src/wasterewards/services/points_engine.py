"""Reward points calculation and tier progression.

Everything here is pure: no sessions, no clock, no logging. The ledger and
report services call in with plain values and persist the results.
"""

from __future__ import annotations

import enum
import re
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

from .errors import InvalidAmount, UnknownWasteType


class WasteType(str, enum.Enum):
    """Closed set of waste categories a report can be scored under."""

    FOOD_WASTE = "Foodwaste"
    ELECTRONIC_WASTE = "Electroicwaste"
    OTHER = "other"


# Points per kilogram.
WASTE_TYPE_MULTIPLIERS: dict[WasteType, int] = {
    WasteType.FOOD_WASTE: 10,
    WasteType.ELECTRONIC_WASTE: 15,
    WasteType.OTHER: 6,
}

QUANTITY_BONUS_THRESHOLD_KG = 50
QUANTITY_BONUS_PERCENT = 10

FREQUENCY_BONUS_STEP = 5
FREQUENCY_BONUS_PERCENT = 5

DEFAULT_WASTE_AMOUNT_KG = Decimal("10")
MAX_WASTE_AMOUNT_KG = Decimal("100000")

# Lower bound of each level, highest first.
LEVEL_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (5, 5000),
    (4, 3000),
    (3, 1500),
    (2, 500),
    (1, 0),
)

TIER_NAMES: dict[int, str] = {
    1: "Bronze",
    2: "Silver",
    3: "Gold",
    4: "Platinum",
    5: "Diamond",
}

_AMOUNT_PATTERN = re.compile(r"\d+(\.\d+)?")

Number = Union[int, float, Decimal]


@dataclass(frozen=True)
class PointsCalculation:
    """Result of scoring one waste submission."""

    total_points: int
    base_points: int
    quantity_bonus_points: int
    frequency_bonus_points: int
    breakdown: dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        return (
            f"{self.base_points} base + {self.quantity_bonus_points} quantity + "
            f"{self.frequency_bonus_points} frequency = {self.total_points} points"
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _round(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_waste_type(value: str | WasteType | None, *, strict: bool = False) -> WasteType:
    """Map submitted free text onto :class:`WasteType`.

    Matching ignores case and surrounding whitespace. Unrecognised values are
    scored as ``other`` unless ``strict`` is set.
    """

    if isinstance(value, WasteType):
        return value
    normalized = (value or "").strip().lower()
    for waste_type in WasteType:
        if waste_type.value.lower() == normalized:
            return waste_type
    if strict:
        raise UnknownWasteType(f"Unrecognised waste type {value!r}.")
    return WasteType.OTHER


def parse_waste_amount(text: str | None) -> Decimal:
    """Extract kilograms from a free-text amount such as ``"12.5 kg"``."""

    match = _AMOUNT_PATTERN.search(text or "")
    if match is None:
        return DEFAULT_WASTE_AMOUNT_KG
    return Decimal(match.group(0))


def validate_waste_amount(text: str | None) -> Decimal:
    """Parse a free-text amount, rejecting anything above ``MAX_WASTE_AMOUNT_KG``."""

    kilograms = parse_waste_amount(text)
    if kilograms > MAX_WASTE_AMOUNT_KG:
        raise InvalidAmount(f"Waste amount {kilograms} kg exceeds the {MAX_WASTE_AMOUNT_KG} kg limit.")
    return kilograms


def calculate_reward_points(
    waste_type: str | WasteType,
    amount: Number,
    submission_count: int,
) -> PointsCalculation:
    """Score a waste submission.

    Base points are ``multiplier * amount``. Submissions of 50 kg or more earn
    a 10% quantity bonus, and every 5 verified submissions add another 5% of
    base as a frequency bonus. Each component is rounded on its own before
    the total is summed.
    """

    category = parse_waste_type(waste_type)
    multiplier = WASTE_TYPE_MULTIPLIERS[category]
    kilograms = _to_decimal(amount)

    base_points = _round(multiplier * kilograms)

    quantity_bonus_points = 0
    if kilograms >= QUANTITY_BONUS_THRESHOLD_KG:
        quantity_bonus_points = _round(Decimal(base_points * QUANTITY_BONUS_PERCENT) / 100)

    frequency_bonus_points = 0
    frequency_level = submission_count // FREQUENCY_BONUS_STEP
    if frequency_level > 0:
        bonus_percent = frequency_level * FREQUENCY_BONUS_PERCENT
        frequency_bonus_points = _round(Decimal(base_points * bonus_percent) / 100)

    total_points = base_points + quantity_bonus_points + frequency_bonus_points

    return PointsCalculation(
        total_points=total_points,
        base_points=base_points,
        quantity_bonus_points=quantity_bonus_points,
        frequency_bonus_points=frequency_bonus_points,
        breakdown={
            "waste_type": category.value,
            "amount": kilograms,
            "multiplier": multiplier,
            "submission_count": submission_count,
            "frequency_level": frequency_level,
        },
    )


def calculate_level(total_points: int) -> int:
    """Return the 1-5 level for a points total."""

    for level, threshold in LEVEL_THRESHOLDS:
        if total_points >= threshold:
            return level
    return 1


def tier_name(level: int) -> str:
    return TIER_NAMES[level]
