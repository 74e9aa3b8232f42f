import os
from dotenv import load_dotenv

load_dotenv()

# Currency symbol appended to every formatted amount
CURRENCY_SYMBOL = os.environ.get("EV_CURRENCY_SYMBOL", "€")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Dashboard / Static Assets
STATIC_URL = os.environ.get("STATIC_URL", "")
