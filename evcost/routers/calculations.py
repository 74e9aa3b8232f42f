from __future__ import annotations

import logging
import math

from fastapi import APIRouter, HTTPException

from ..schemas import (
    CalculationRequest,
    CalculationResponse,
    CalculationResultRead,
    CalculatorConfigRead,
    ChartWidths,
    SourceRead,
)
from ..services.calculator import SOURCE_LABELS, Calculator, CalculatorConfig
from ..services.fields import build_form_state
from ..services.presenter import chart_widths

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculations", tags=["Calculations"])


@router.get("/config", response_model=CalculatorConfigRead)
async def get_calculator_config():
    config = CalculatorConfig()
    return CalculatorConfigRead(
        currency=config.currency,
        sources=[SourceRead(key=key, label=label) for key, label in SOURCE_LABELS.items()],
    )


@router.post("", response_model=CalculationResponse)
async def calculate(data: CalculationRequest):
    """
    Validate raw field values and compute charging costs.
    Validation failures are reported in the body, not as an HTTP error.
    """
    keys = [source.key for source in data.sources]
    unknown = [key for key in keys if key not in SOURCE_LABELS]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown charging source: {', '.join(unknown)}")
    if len(set(keys)) != len(keys):
        raise HTTPException(status_code=400, detail="Each charging source may only appear once")

    form = {
        "daily_km": data.daily_km,
        "consumption": data.consumption,
        "price": data.price,
    }
    for source in data.sources:
        form[f"{source.key}_enabled"] = source.enabled
        form[f"{source.key}_percentage"] = source.percentage
        form[f"{source.key}_price"] = source.price

    state = build_form_state(form, source_keys=keys)
    config = CalculatorConfig()
    calculator = Calculator(state.mount, config)
    calculator.initialize()
    outcome = calculator.calculate()

    logger.info("Calculation request handled (valid=%s)", outcome.is_valid)

    response = CalculationResponse(
        is_valid=outcome.is_valid,
        errors=state.errors(),
        advisory=state.tip.text,
        use_weighted_price=outcome.inputs.use_weighted_price,
        currency=config.currency,
    )
    if outcome.result is None:
        return response

    if math.isfinite(outcome.inputs.price):
        response.effective_price = outcome.inputs.price
    response.result = CalculationResultRead.model_validate(outcome.result)
    response.formatted = {key: output.text for key, output in state.outputs.items()}
    response.subtitles = {key: output.text for key, output in state.subtitles.items()}
    response.charts = ChartWidths(**chart_widths(outcome.result))
    return response
