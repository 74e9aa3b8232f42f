from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from .inputs import is_valid_percentage, is_valid_positive


DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365

# Allowed gap between the allocated total and 100 % before hinting
PERCENTAGE_TOLERANCE = 0.5

ZERO_PERCENTAGE_ADVISORY = "Renseignez des pourcentages supérieurs à 0 pour utiliser ces options."
INCOMPLETE_ALLOCATION_ADVISORY = (
    "Astuce : pour un résultat plus précis, faites en sorte que le total fasse 100 %. "
    "Total actuel : {total} %."
)
ALLOCATION_TOTAL_ADVISORY = "Répartition totale : {total} %."


@dataclass(frozen=True)
class CalculationResult:
    energy_per_day: float
    cost_per_100: float
    cost_per_day: float
    cost_per_week: float
    cost_per_month: float
    cost_per_year: float


@dataclass(frozen=True)
class CostModel:
    daily_distance: float
    consumption_per_100: float  # kWh per 100 km
    price_per_kwh: float

    def energy_per_day(self) -> float:
        return self.daily_distance * self.consumption_per_100 / 100

    def cost_per_day(self) -> float:
        return self.energy_per_day() * self.price_per_kwh

    def cost_per_100(self) -> float:
        return self.consumption_per_100 * self.price_per_kwh

    def result(self) -> CalculationResult:
        per_day = self.cost_per_day()
        return CalculationResult(
            energy_per_day=self.energy_per_day(),
            cost_per_100=self.cost_per_100(),
            cost_per_day=per_day,
            cost_per_week=per_day * DAYS_PER_WEEK,
            cost_per_month=per_day * DAYS_PER_MONTH,
            cost_per_year=per_day * DAYS_PER_YEAR,
        )


@dataclass(frozen=True)
class WeightedPrice:
    """Outcome of aggregating the enabled charging sources."""

    used: bool
    valid: bool
    weighted_sum: float = 0.0
    total_ratio: float = 0.0
    total_percentage: float = 0.0
    advisory: str = ""

    @property
    def usable(self) -> bool:
        return self.used and self.valid and self.total_ratio > 0

    @property
    def effective_price(self) -> Optional[float]:
        if not self.usable:
            return None
        return self.weighted_sum / self.total_ratio


def format_percentage(value: float) -> str:
    return str(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def allocation_advisory(total_percentage: float) -> str:
    if total_percentage <= 0:
        return ZERO_PERCENTAGE_ADVISORY
    total = format_percentage(total_percentage)
    if abs(total_percentage - 100) > PERCENTAGE_TOLERANCE:
        return INCOMPLETE_ALLOCATION_ADVISORY.format(total=total)
    return ALLOCATION_TOTAL_ADVISORY.format(total=total)


def resolve_weighted_price(readings: Iterable[Tuple[float, float]]) -> WeightedPrice:
    """
    Aggregate (percentage, price) readings of the enabled sources.

    Each valid reading contributes price * percentage / 100. The effective
    price is weighted_sum / total_ratio, so a partial allocation is treated
    as the whole mix.
    """
    used = False
    valid = True
    weighted_sum = 0.0
    total_ratio = 0.0
    total_percentage = 0.0

    for percentage, price in readings:
        used = True
        if not (is_valid_percentage(percentage) and is_valid_positive(price)):
            valid = False
            continue

        ratio = percentage / 100
        weighted_sum += price * ratio
        total_ratio += ratio
        total_percentage += percentage

    if not used:
        return WeightedPrice(used=False, valid=True)

    if total_percentage <= 0:
        valid = False

    return WeightedPrice(
        used=True,
        valid=valid,
        weighted_sum=weighted_sum,
        total_ratio=total_ratio,
        total_percentage=total_percentage,
        advisory=allocation_advisory(total_percentage),
    )
