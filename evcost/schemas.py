import math

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional


# -----------------
# REQUEST SCHEMAS
# -----------------

class SourceInput(BaseModel):
    key: str = Field(..., min_length=1, max_length=32)
    enabled: bool = False
    percentage: Optional[str] = None
    price: Optional[str] = None


class CalculationRequest(BaseModel):
    # Raw text as typed by the user; "12,5" and "12.5" are both accepted
    daily_km: Optional[str] = None
    consumption: Optional[str] = None
    price: Optional[str] = None
    sources: List[SourceInput] = []


# -----------------
# RESPONSE SCHEMAS
# -----------------

class CalculationResultRead(BaseModel):
    # None when the amount overflowed; JSON has no infinity
    energy_per_day: Optional[float] = None
    cost_per_100: Optional[float] = None
    cost_per_day: Optional[float] = None
    cost_per_week: Optional[float] = None
    cost_per_month: Optional[float] = None
    cost_per_year: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def drop_non_finite(cls, value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value

    class Config:
        from_attributes = True


class ChartWidths(BaseModel):
    week: float = Field(0.0, ge=0)
    month: float = Field(0.0, ge=0)
    year: float = Field(0.0, ge=0)


class CalculationResponse(BaseModel):
    is_valid: bool
    errors: Dict[str, str] = {}
    advisory: str = ""
    use_weighted_price: bool = False
    effective_price: Optional[float] = None
    currency: str
    result: Optional[CalculationResultRead] = None
    formatted: Dict[str, str] = {}
    subtitles: Dict[str, str] = {}
    charts: Optional[ChartWidths] = None


class SourceRead(BaseModel):
    key: str
    label: str


class CalculatorConfigRead(BaseModel):
    currency: str
    sources: List[SourceRead]
