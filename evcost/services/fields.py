from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .calculator import SOURCE_LABELS, CalculatorMount, WeightedSource
from .presenter import CHART_PERIODS, OUTPUT_KEYS, PLACEHOLDER, SUBTITLES


@dataclass
class FormField:
    """In-memory field filled from submitted request data."""

    name: str
    value: str = ""
    error: str = ""

    def read_value(self) -> Optional[str]:
        return self.value

    def set_error(self, message: str) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = ""

    def clear_value(self) -> None:
        self.value = ""

    @property
    def has_error(self) -> bool:
        return bool(self.error)


@dataclass
class FormCheckbox:
    checked: bool = False

    def is_checked(self) -> bool:
        return self.checked


@dataclass
class TextOutput:
    text: str = ""
    width: float = 0.0

    def set_text(self, text: str) -> None:
        self.text = text

    def set_bar_width(self, percent: float) -> None:
        self.width = percent


DEFAULT_SUBTITLES = {
    "per_day": "Base de calcul quotidienne.",
    "per_week": "Projection sur 7 jours.",
    "per_month": "Estimation sur 30 jours.",
    "per_year": "Projection sur 365 jours.",
}


@dataclass
class FormState:
    """Field values and outputs of one calculator, ready for a template."""

    fields: Dict[str, FormField]
    checkboxes: Dict[str, FormCheckbox]
    mount: CalculatorMount
    outputs: Dict[str, TextOutput] = field(default_factory=dict)
    subtitles: Dict[str, TextOutput] = field(default_factory=dict)
    charts: Dict[str, TextOutput] = field(default_factory=dict)
    tip: TextOutput = field(default_factory=TextOutput)

    def errors(self) -> Dict[str, str]:
        return {name: f.error for name, f in self.fields.items() if f.error}


def _text(data: Mapping[str, object], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value)


def _checked(data: Mapping[str, object], key: str) -> bool:
    value = data.get(key)
    if isinstance(value, bool):
        return value
    return _text(data, key).lower() in ("1", "on", "true", "yes")


def build_form_state(
    data: Mapping[str, object],
    source_keys=tuple(SOURCE_LABELS),
    advanced_open: bool = False,
) -> FormState:
    """
    Build fields, outputs and the CalculatorMount from flat form data.

    Expected keys: daily_km, consumption, price and, per source key,
    <key>_enabled, <key>_percentage, <key>_price.
    """
    fields = {
        name: FormField(name, _text(data, name))
        for name in ("daily_km", "consumption", "price")
    }
    checkboxes: Dict[str, FormCheckbox] = {}
    sources = []

    for key in source_keys:
        percentage = FormField(f"{key}_percentage", _text(data, f"{key}_percentage"))
        price = FormField(f"{key}_price", _text(data, f"{key}_price"))
        checkbox = FormCheckbox(_checked(data, f"{key}_enabled"))
        fields[percentage.name] = percentage
        fields[price.name] = price
        checkboxes[key] = checkbox
        sources.append(
            WeightedSource(
                key=key,
                checkbox=checkbox,
                percentage=percentage,
                price=price,
                label=SOURCE_LABELS.get(key, key),
            )
        )

    outputs = {key: TextOutput(PLACEHOLDER) for key in OUTPUT_KEYS}
    subtitles = {key: TextOutput(DEFAULT_SUBTITLES[key]) for key in SUBTITLES}
    charts = {period: TextOutput(PLACEHOLDER) for period in CHART_PERIODS}
    tip = TextOutput()

    mount = CalculatorMount(
        daily_distance=fields["daily_km"],
        consumption=fields["consumption"],
        price=fields["price"],
        sources=sources,
        tip=tip,
        outputs=outputs,
        subtitles=subtitles,
        charts=charts,
    )
    mount.advanced.visible = advanced_open

    return FormState(
        fields=fields,
        checkboxes=checkboxes,
        mount=mount,
        outputs=outputs,
        subtitles=subtitles,
        charts=charts,
        tip=tip,
    )
