"""Environment variable loading for deployment-specific overrides."""

import os
from dotenv import load_dotenv

from .settings import DEFAULT_DATA_BASE_URL, REQUEST_TIMEOUT_SECONDS

load_dotenv()


class Environment:
    """Container for values that may be overridden from the environment / .env."""

    DATA_BASE_URL = os.getenv("LEAGUE_DATA_BASE_URL", DEFAULT_DATA_BASE_URL).rstrip("/")
    REQUEST_TIMEOUT = float(os.getenv("LEAGUE_REQUEST_TIMEOUT", REQUEST_TIMEOUT_SECONDS))
