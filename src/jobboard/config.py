# src/jobboard/config.py
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # picks up a .env file in the working directory


def _env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class Settings:
    """Read from the environment each time a Settings is created."""

    # Published CSV (gviz or export URL); takes precedence over everything else
    csv_url: Optional[str] = field(default_factory=lambda: os.getenv("JOBBOARD_CSV_URL"))

    sheet_id: Optional[str] = field(default_factory=lambda: os.getenv("JOBBOARD_SHEET_ID"))
    sheet_name: str = field(default_factory=lambda: os.getenv("JOBBOARD_SHEET_NAME", "JobBoard"))
    gid: int = field(default_factory=lambda: _env_int("JOBBOARD_GID", 0))

    # Sheets values API (public sheets, API key only)
    api_key: Optional[str] = field(default_factory=lambda: os.getenv("GOOGLE_API_KEY"))
    values_range: str = field(default_factory=lambda: os.getenv("JOBBOARD_RANGE", "JobBoard!A:J"))

    # Private sheets via gspread
    service_account_file: str = field(
        default_factory=lambda: os.getenv("JOBBOARD_SERVICE_ACCOUNT", "service_account_jobbot.json")
    )

    per_page: int = field(default_factory=lambda: _env_int("JOBBOARD_PER_PAGE", 10, minimum=1))
    http_timeout: float = field(default_factory=lambda: _env_float("JOBBOARD_HTTP_TIMEOUT", 20))
