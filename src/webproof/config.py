import os
from dotenv import load_dotenv

load_dotenv()

# Freshness window applied by verify_proof when the caller passes none
MAX_AGE_SEC = int(os.getenv("WEBPROOF_MAX_AGE_SEC", "300"))
# Proofs stamped further than this into the future are rejected
MAX_CLOCK_SKEW_SEC = int(os.getenv("WEBPROOF_MAX_CLOCK_SKEW_SEC", "30"))

# Content sources
FETCH_TIMEOUT_SEC = float(os.getenv("WEBPROOF_FETCH_TIMEOUT_SEC", "10"))
ETH_PRICE_URL = os.getenv(
    "WEBPROOF_ETH_PRICE_URL",
    "https://api.coingecko.com/api/v3/simple/price?ids=ethereum&vs_currencies=usd",
)
WEATHER_URL = os.getenv("WEBPROOF_WEATHER_URL", "https://api.openweathermap.org/data/2.5/weather")
OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")

# Session binding
EXPORTER_HEADER = os.getenv("WEBPROOF_EXPORTER_HEADER", "x-tls-exporter")

# Logging
LOG_LEVEL = os.getenv("WEBPROOF_LOG_LEVEL", "INFO")
