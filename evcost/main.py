import logging

from fastapi import FastAPI
from mangum import Mangum

from evcost.config import LOG_LEVEL
from evcost.routers import calculations
from evcost.dashboard import router as dashboard_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="EV Cost Calculator")

# API Routers
app.include_router(calculations.router)

# Dashboard Routers
app.include_router(dashboard_router.router)

handler = Mangum(app)
