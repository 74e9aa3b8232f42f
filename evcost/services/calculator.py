from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import CURRENCY_SYMBOL
from .costs import CalculationResult, CostModel, WeightedPrice, resolve_weighted_price
from .inputs import (
    PERCENTAGE_MESSAGE,
    SOURCE_PRICE_MESSAGE,
    Checkbox,
    Field,
    Output,
    is_valid_percentage,
    is_valid_positive,
    validate_field,
)
from .presenter import Presenter

logger = logging.getLogger(__name__)


# Charging locations offered in the advanced options, in display order
SOURCE_LABELS = {
    "home": "Domicile",
    "public": "Borne publique",
    "work": "Travail",
}


@dataclass(frozen=True)
class CalculatorConfig:
    currency: str = CURRENCY_SYMBOL


@dataclass
class Disclosure:
    """Show/hide state of a panel plus the ARIA attributes that mirror it."""

    visible: bool = False

    def toggle(self) -> bool:
        self.visible = not self.visible
        return self.visible

    def toggle_attributes(self) -> Dict[str, str]:
        return {"aria-expanded": "true" if self.visible else "false"}

    def panel_attributes(self) -> Dict[str, object]:
        return {"aria-hidden": "false" if self.visible else "true", "hidden": not self.visible}


@dataclass
class WeightedSource:
    key: str
    checkbox: Checkbox
    percentage: Field
    price: Field
    label: str = ""
    group: Disclosure = field(default_factory=Disclosure)

    @property
    def enabled(self) -> bool:
        return bool(self.checkbox and self.checkbox.is_checked())


@dataclass
class CalculatorMount:
    """Everything one calculator instance reads from and writes to."""

    daily_distance: Field
    consumption: Field
    price: Field
    sources: Sequence[WeightedSource] = ()
    tip: Optional[Output] = None
    outputs: Mapping[str, Output] = field(default_factory=dict)
    subtitles: Mapping[str, Output] = field(default_factory=dict)
    charts: Mapping[str, Output] = field(default_factory=dict)
    advanced: Disclosure = field(default_factory=Disclosure)


@dataclass(frozen=True)
class CollectedInputs:
    is_valid: bool
    daily_distance: float
    consumption_per_100: float
    price: float
    use_weighted_price: bool
    weighted: WeightedPrice


@dataclass(frozen=True)
class CalculationOutcome:
    inputs: CollectedInputs
    result: Optional[CalculationResult] = None

    @property
    def is_valid(self) -> bool:
        return self.inputs.is_valid


def _set_tip(tip: Optional[Output], message: str) -> None:
    if tip is not None:
        tip.set_text(message)


def _clear_source_errors(source: WeightedSource) -> None:
    if source.percentage is not None:
        source.percentage.clear_error()
    if source.price is not None:
        source.price.clear_error()


def collect_inputs(
    daily_distance: Field,
    consumption: Field,
    price: Field,
    sources: Iterable[WeightedSource] = (),
    tip: Optional[Output] = None,
) -> CollectedInputs:
    """
    Run one validation pass over the form.

    Every field receives its own message. Enabled sources raise the bar:
    the base price is only waived when the weighted price is usable.
    """
    has_error = False

    distance_value, distance_check = validate_field(daily_distance)
    consumption_value, consumption_check = validate_field(consumption)
    if not distance_check.valid or not consumption_check.valid:
        has_error = True

    readings = []
    for source in sources:
        if not source.enabled:
            _clear_source_errors(source)
            continue

        percentage, _ = validate_field(source.percentage, is_valid_percentage, PERCENTAGE_MESSAGE)
        unit_price, _ = validate_field(source.price, is_valid_positive, SOURCE_PRICE_MESSAGE)
        readings.append((percentage.value, unit_price.value))

    weighted = resolve_weighted_price(readings)
    if weighted.used and not weighted.valid:
        has_error = True
    _set_tip(tip, weighted.advisory)

    if weighted.usable:
        effective_price = weighted.effective_price
        if price is not None:
            price.clear_error()
    else:
        base_price, base_check = validate_field(price)
        effective_price = base_price.value
        if not base_check.valid:
            has_error = True

    if has_error:
        logger.debug("Validation failed, computation blocked")
        return CollectedInputs(
            is_valid=False,
            daily_distance=0,
            consumption_per_100=0,
            price=0,
            use_weighted_price=weighted.usable,
            weighted=weighted,
        )

    return CollectedInputs(
        is_valid=True,
        daily_distance=distance_value.value,
        consumption_per_100=consumption_value.value,
        price=effective_price,
        use_weighted_price=weighted.usable,
        weighted=weighted,
    )


class Calculator:
    """One calculator instance bound to its own mount point."""

    def __init__(self, mount: CalculatorMount, config: Optional[CalculatorConfig] = None):
        self.mount = mount
        self.config = config or CalculatorConfig()
        self.presenter = Presenter(
            mount.outputs,
            subtitles=mount.subtitles,
            charts=mount.charts,
            currency=self.config.currency,
        )
        self._sources = {source.key: source for source in mount.sources}

    @property
    def sources(self) -> List[WeightedSource]:
        return list(self.mount.sources)

    def source(self, key: str) -> WeightedSource:
        return self._sources[key]

    def initialize(self) -> None:
        for source in self.mount.sources:
            source.group.visible = source.enabled

    def toggle_advanced(self) -> bool:
        return self.mount.advanced.toggle()

    def set_source_enabled(self, key: str, enabled: bool) -> None:
        """Show or hide one source group; hiding wipes its values and errors."""
        source = self._sources[key]
        source.group.visible = bool(enabled)

        if not enabled:
            for slot in (source.percentage, source.price):
                if slot is None:
                    continue
                slot.clear_error()
                slot.clear_value()

        _set_tip(self.mount.tip, "")

    def collect(self) -> CollectedInputs:
        mount = self.mount
        return collect_inputs(
            mount.daily_distance,
            mount.consumption,
            mount.price,
            sources=mount.sources,
            tip=mount.tip,
        )

    def calculate(self) -> CalculationOutcome:
        inputs = self.collect()
        if not inputs.is_valid:
            return CalculationOutcome(inputs=inputs)

        result = CostModel(
            daily_distance=inputs.daily_distance,
            consumption_per_100=inputs.consumption_per_100,
            price_per_kwh=inputs.price,
        ).result()
        logger.debug(
            "Computed %.4f per day at %.4f per kWh (weighted=%s)",
            result.cost_per_day,
            inputs.price,
            inputs.use_weighted_price,
        )

        self.presenter.render(result)
        return CalculationOutcome(inputs=inputs, result=result)


def mount_calculators(
    config: Optional[CalculatorConfig],
    mounts: Iterable[CalculatorMount],
) -> List[Calculator]:
    """Create one independent calculator per mount point."""
    calculators = []
    for mount in mounts:
        calculator = Calculator(mount, config)
        calculator.initialize()
        calculators.append(calculator)
    return calculators
