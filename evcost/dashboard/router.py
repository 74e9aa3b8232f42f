from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..config import STATIC_URL
from ..services.calculator import Calculator, CalculatorConfig, mount_calculators
from ..services.fields import FormState, build_form_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculator", tags=["Calculator"])

TEMPLATE_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))

ACTION_CALCULATE = "calculate"
ACTION_TOGGLE_ADVANCED = "toggle-advanced"


def _template_context(request: Request, **kwargs) -> dict:
    """Build common template context with config values."""
    return {
        "request": request,
        "STATIC_URL": STATIC_URL,
        **kwargs,
    }


def _render(request: Request, state: FormState, calculator: Calculator):
    ctx = _template_context(
        request,
        state=state,
        calculator=calculator,
        currency=calculator.config.currency,
    )
    return templates.TemplateResponse(request, "calculator.html", ctx)


@router.get("", response_class=HTMLResponse)
async def calculator_page(request: Request):
    """Render an empty calculator."""
    state = build_form_state({})
    (calculator,) = mount_calculators(CalculatorConfig(), [state.mount])
    return _render(request, state, calculator)


@router.post("", response_class=HTMLResponse)
async def submit_calculator(request: Request):
    """Handle the calculate button and the advanced options toggle."""
    form = await request.form()
    data = {key: form.get(key) for key in form.keys()}
    action = str(data.get("action") or ACTION_CALCULATE)
    advanced_open = str(data.get("advanced_open") or "") == "true"

    state = build_form_state(data, advanced_open=advanced_open)
    (calculator,) = mount_calculators(CalculatorConfig(), [state.mount])

    for source in calculator.sources:
        if not source.enabled:
            calculator.set_source_enabled(source.key, False)

    if action == ACTION_TOGGLE_ADVANCED:
        calculator.toggle_advanced()
    else:
        outcome = calculator.calculate()
        logger.info("Calculator submitted (valid=%s)", outcome.is_valid)

    return _render(request, state, calculator)
