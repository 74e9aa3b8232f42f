from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, Mapping, Optional

from .costs import CalculationResult
from .inputs import Output

PLACEHOLDER = "—"
INFINITY = "∞"
THOUSANDS_SEPARATOR = "\u202f"  # narrow no-break space
DECIMAL_SEPARATOR = ","

OUTPUT_KEYS = ("per_100km", "per_day", "per_week", "per_month", "per_year")
CHART_PERIODS = ("week", "month", "year")

SUBTITLES = {
    "per_day": "Basé sur {amount} par jour.",
    "per_week": "Projection de {amount} chaque semaine.",
    "per_month": "Environ {amount} par mois.",
    "per_year": "Soit {amount} à l'année.",
}


def format_currency(value: Optional[float], currency: str = "€") -> str:
    """Two decimals, French grouping, currency symbol appended."""
    if value is None or math.isnan(value):
        return PLACEHOLDER
    if math.isinf(value):
        sign = "-" if value < 0 else ""
        return f"{sign}{INFINITY} {currency}"

    exact = Decimal(value)
    with localcontext() as ctx:
        # room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, exact.adjusted() + 3)
        amount = exact.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        text = f"{amount:,.2f}"
    text = text.replace(",", THOUSANDS_SEPARATOR).replace(".", DECIMAL_SEPARATOR)
    return f"{text} {currency}"


def bar_width(value: float, week: float, month: float, year: float) -> float:
    highest = max(week, month, year)
    if highest > 0:
        width = value / highest * 100
        if math.isfinite(width):
            return width
    return 0


def result_values(result: CalculationResult) -> Dict[str, float]:
    return {
        "per_100km": result.cost_per_100,
        "per_day": result.cost_per_day,
        "per_week": result.cost_per_week,
        "per_month": result.cost_per_month,
        "per_year": result.cost_per_year,
    }


def chart_values(result: CalculationResult) -> Dict[str, float]:
    return {
        "week": result.cost_per_week,
        "month": result.cost_per_month,
        "year": result.cost_per_year,
    }


def chart_widths(result: CalculationResult) -> Dict[str, float]:
    values = chart_values(result)
    week, month, year = values["week"], values["month"], values["year"]
    return {period: bar_width(values[period], week, month, year) for period in CHART_PERIODS}


class Presenter:
    """Writes a CalculationResult into output slots."""

    def __init__(
        self,
        outputs: Mapping[str, Output],
        subtitles: Optional[Mapping[str, Output]] = None,
        charts: Optional[Mapping[str, Output]] = None,
        currency: str = "€",
    ):
        self.outputs = outputs
        self.subtitles = subtitles or {}
        self.charts = charts or {}
        self.currency = currency

    def format(self, value: Optional[float]) -> str:
        return format_currency(value, self.currency)

    def formatted(self, result: CalculationResult) -> Dict[str, str]:
        return {key: self.format(value) for key, value in result_values(result).items()}

    def render(self, result: CalculationResult) -> None:
        values = result_values(result)

        for key in OUTPUT_KEYS:
            output = self.outputs.get(key)
            if output is not None:
                output.set_text(self.format(values[key]))

        for key, template in SUBTITLES.items():
            output = self.subtitles.get(key)
            if output is not None:
                output.set_text(template.format(amount=self.format(values[key])))

        period_values = chart_values(result)
        for period, width in chart_widths(result).items():
            chart = self.charts.get(period)
            if chart is None:
                continue
            chart.set_bar_width(width)
            chart.set_text(self.format(period_values[period]))
