import os
from pathlib import Path
from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env")

def env(name: str) -> str:
    v = os.getenv(name)
    if not v: raise RuntimeError(f"Missing env var: {name}")
    return v


class Settings:
    """Environment-backed settings. Read lazily so tests can monkeypatch os.environ."""

    @property
    def LINES_CSV(self) -> str:
        return env("LINES_CSV")

    @property
    def CLIENTS_CSV(self) -> str | None:
        # client-level dates are optional
        return os.getenv("CLIENTS_CSV") or None

    @property
    def SITES_CSV(self) -> str | None:
        return os.getenv("SITES_CSV") or None

    @property
    def COVERAGE_LOCALE(self) -> str:
        return (os.getenv("COVERAGE_LOCALE") or "en").strip().lower()

    @property
    def LOG_LEVEL(self) -> str:
        return (os.getenv("LOG_LEVEL") or "INFO").upper()

    @property
    def APP_TITLE(self) -> str:
        return os.getenv("APP_TITLE") or "SupportDesk Coverage"


settings = Settings()
