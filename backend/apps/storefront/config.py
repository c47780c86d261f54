import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT = 10.0


def _timeout_from_env(raw):
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT
    if raw.strip().lower() == "none":
        return None
    return float(raw)


STOREFRONT_API_URL = os.getenv("STOREFRONT_API_URL", DEFAULT_API_URL).rstrip("/")
# Seconds; "none" leaves requests without a timeout
STOREFRONT_TIMEOUT = _timeout_from_env(os.getenv("STOREFRONT_TIMEOUT"))
