from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol


POSITIVE_VALUE_MESSAGE = "Veuillez saisir une valeur supérieure à 0."
PERCENTAGE_MESSAGE = "Pourcentage entre 0 et 100 requis."
SOURCE_PRICE_MESSAGE = "Indiquez un prix supérieur à 0."

# Longest numeric prefix, the way a browser's parseFloat reads it
_NUMBER_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.ASCII,
)


class Field(Protocol):
    """A single input slot: a text value plus an inline error message."""

    def read_value(self) -> Optional[str]: ...

    def set_error(self, message: str) -> None: ...

    def clear_error(self) -> None: ...

    def clear_value(self) -> None: ...


class Checkbox(Protocol):
    def is_checked(self) -> bool: ...


class Output(Protocol):
    """A place the presenter writes to: a text node, optionally a chart bar."""

    def set_text(self, text: str) -> None: ...

    def set_bar_width(self, percent: float) -> None: ...


@dataclass(frozen=True)
class FieldValue:
    raw: str
    value: float

    @property
    def is_number(self) -> bool:
        return not math.isnan(self.value)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str = ""


def parse_input_value(raw: Optional[str]) -> float:
    """
    Normalise raw text into a float.
    A comma is accepted as decimal separator. Empty text gives NaN.
    """
    if raw is None:
        return math.nan

    text = raw.strip() if isinstance(raw, str) else ""
    if text == "":
        return math.nan

    match = _NUMBER_PREFIX.match(text.replace(",", ".", 1))
    if not match:
        return math.nan

    number = match.group(0)
    if number.lstrip("+-") == "Infinity":
        return -math.inf if number.startswith("-") else math.inf
    return float(number)


def is_valid_positive(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def is_valid_percentage(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and 0 <= value <= 100


def check_value(value: float, check: Callable[[float], bool], message: str) -> ValidationResult:
    if check(value):
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, message=message)


def read_field(field: Optional[Field]) -> FieldValue:
    if field is None:
        return FieldValue(raw="", value=math.nan)
    raw = field.read_value() or ""
    return FieldValue(raw=raw, value=parse_input_value(raw))


def apply_result(field: Optional[Field], result: ValidationResult) -> None:
    if field is None:
        return
    if result.valid:
        field.clear_error()
    else:
        field.set_error(result.message)


def validate_field(
    field: Optional[Field],
    check: Callable[[float], bool] = is_valid_positive,
    message: str = POSITIVE_VALUE_MESSAGE,
) -> tuple[FieldValue, ValidationResult]:
    """Read, parse and validate one field, updating its error slot."""
    value = read_field(field)
    result = check_value(value.value, check, message)
    apply_result(field, result)
    return value, result
