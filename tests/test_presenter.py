import math

import pytest

from evcost.services.costs import CostModel
from evcost.services.fields import TextOutput
from evcost.services.presenter import Presenter, bar_width, chart_widths, format_currency

NNBSP = "\u202f"


def test_format_currency_french_convention():
    assert format_currency(3) == "3,00 €"
    assert format_currency(547.5) == "547,50 €"
    assert format_currency(1234.5) == f"1{NNBSP}234,50 €"
    assert format_currency(1234567.891) == f"1{NNBSP}234{NNBSP}567,89 €"


def test_format_currency_rounds_half_up():
    assert format_currency(0.125) == "0,13 €"
    assert format_currency(2.675, "$") == "2,67 $"  # 2.675 is stored just below the midpoint


def test_not_a_number_formats_as_placeholder():
    assert format_currency(math.nan) == "—"
    assert format_currency(None) == "—"


def test_bar_width_relative_to_largest_period():
    assert bar_width(365, 7, 30, 365) == 100
    assert bar_width(0, 0, 0, 10) == 0
    assert bar_width(30, 7, 30, 365) == pytest.approx(30 / 365 * 100)


def test_bar_width_is_zero_when_all_periods_are_zero():
    assert bar_width(0, 0, 0, 0) == 0


def test_chart_widths_for_result():
    widths = chart_widths(CostModel(50, 15, 0.20).result())

    assert widths["year"] == 100
    assert widths["week"] == pytest.approx(7 / 365 * 100)
    assert widths["month"] == pytest.approx(30 / 365 * 100)


def test_render_writes_outputs_subtitles_and_charts():
    outputs = {key: TextOutput() for key in ("per_100km", "per_day", "per_week", "per_month", "per_year")}
    subtitles = {key: TextOutput() for key in ("per_day", "per_week", "per_month", "per_year")}
    charts = {period: TextOutput() for period in ("week", "month", "year")}

    Presenter(outputs, subtitles, charts).render(CostModel(50, 15, 0.20).result())

    assert outputs["per_100km"].text == "3,00 €"
    assert outputs["per_day"].text == "1,50 €"
    assert outputs["per_week"].text == "10,50 €"
    assert outputs["per_month"].text == "45,00 €"
    assert outputs["per_year"].text == "547,50 €"
    assert subtitles["per_day"].text == "Basé sur 1,50 € par jour."
    assert subtitles["per_year"].text == "Soit 547,50 € à l'année."
    assert charts["year"].width == 100
    assert charts["year"].text == "547,50 €"


def test_render_skips_missing_outputs_and_uses_currency():
    outputs = {"per_day": TextOutput()}

    Presenter(outputs, currency="CHF").render(CostModel(50, 15, 0.20).result())

    assert outputs["per_day"].text == "1,50 CHF"


def test_format_currency_handles_amounts_beyond_default_precision():
    text = format_currency(1e30)

    assert text.startswith(f"1{NNBSP}000{NNBSP}000{NNBSP}")
    assert text.endswith(",00 €")
    assert format_currency(3.65e300).endswith(",00 €")


def test_format_currency_infinity():
    assert format_currency(math.inf) == "∞ €"
    assert format_currency(-math.inf, "$") == "-∞ $"


def test_bar_width_with_overflowed_periods_is_zero():
    assert bar_width(math.inf, math.inf, math.inf, math.inf) == 0
    assert bar_width(10, 10, 30, math.inf) == 0


def test_render_overflowed_result_does_not_raise():
    outputs = {"per_day": TextOutput(), "per_100km": TextOutput()}
    charts = {"year": TextOutput()}

    Presenter(outputs, charts=charts).render(CostModel(1e300, 1e300, 1).result())

    assert outputs["per_day"].text == "∞ €"
    assert outputs["per_100km"].text.endswith(",00 €")
    assert charts["year"].text == "∞ €"
    assert charts["year"].width == 0
