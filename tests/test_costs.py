import math

import pytest

from evcost.services.costs import (
    ALLOCATION_TOTAL_ADVISORY,
    ZERO_PERCENTAGE_ADVISORY,
    CostModel,
    allocation_advisory,
    resolve_weighted_price,
)


def test_reference_scenario():
    # 50 km/day, 15 kWh/100 km, 0.20 per kWh
    result = CostModel(50, 15, 0.20).result()

    assert result.energy_per_day == pytest.approx(7.5)
    assert result.cost_per_day == pytest.approx(1.50)
    assert result.cost_per_week == pytest.approx(10.50)
    assert result.cost_per_month == pytest.approx(45.00)
    assert result.cost_per_year == pytest.approx(547.50)
    assert result.cost_per_100 == pytest.approx(3.00)


@pytest.mark.parametrize(
    "distance, consumption, price",
    [(50, 15, 0.20), (37.3, 17.9, 0.2516), (1, 0.1, 0.01), (812.4, 23.3, 0.61)],
)
def test_periods_are_exact_multiples_of_daily_cost(distance, consumption, price):
    result = CostModel(distance, consumption, price).result()

    assert result.cost_per_week == result.cost_per_day * 7
    assert result.cost_per_month == result.cost_per_day * 30
    assert result.cost_per_year == result.cost_per_day * 365


def test_weighted_average_of_two_sources():
    weighted = resolve_weighted_price([(60, 0.10), (40, 0.30)])

    assert weighted.usable
    assert weighted.total_percentage == pytest.approx(100)
    assert weighted.effective_price == pytest.approx((0.10 * 0.6 + 0.30 * 0.4) / (0.6 + 0.4))
    assert weighted.effective_price == pytest.approx(0.18)
    assert weighted.advisory == ALLOCATION_TOTAL_ADVISORY.format(total="100")


def test_partial_allocation_is_treated_as_whole_mix():
    weighted = resolve_weighted_price([(60, 0.25)])

    assert weighted.usable
    assert weighted.effective_price == pytest.approx(0.25)
    assert "Total actuel : 60 %." in weighted.advisory


def test_zero_percentage_blocks_weighted_price():
    weighted = resolve_weighted_price([(0, 0.18)])

    assert weighted.used
    assert not weighted.valid
    assert not weighted.usable
    assert weighted.effective_price is None
    assert weighted.advisory == ZERO_PERCENTAGE_ADVISORY


def test_invalid_source_marks_aggregate_invalid_but_keeps_valid_contributions():
    weighted = resolve_weighted_price([(50, 0.20), (50, math.nan)])

    assert not weighted.valid
    assert not weighted.usable
    assert weighted.total_percentage == pytest.approx(50)
    assert weighted.weighted_sum == pytest.approx(0.10)


def test_no_sources_means_not_used():
    weighted = resolve_weighted_price([])

    assert not weighted.used
    assert weighted.valid
    assert weighted.advisory == ""


def test_advisory_tolerance_around_one_hundred():
    assert allocation_advisory(100.4) == ALLOCATION_TOTAL_ADVISORY.format(total="100")
    assert allocation_advisory(99.5) == ALLOCATION_TOTAL_ADVISORY.format(total="100")
    assert "Astuce" in allocation_advisory(99.4)
    assert "Total actuel : 101 %." in allocation_advisory(100.6)
