import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; RemoteJobAggregator/1.0; +https://remotelyyou.com)"
TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


def get_config() -> dict[str, str]:
    """
    Load raw configuration values from environment variables.
    Called lazily to avoid crashing on import.
    """
    return {
        "OUTPUT_PATH": os.getenv("OUTPUT_PATH", "site/public/jobs.json"),
        "USER_AGENT": os.getenv("USER_AGENT", "") or DEFAULT_USER_AGENT,
        "HTTP_TIMEOUT": os.getenv("HTTP_TIMEOUT", "20"),
        "MAX_JOBS": os.getenv("MAX_JOBS", "2000"),
        "BEGINNER_FILTER": os.getenv("BEGINNER_FILTER", "true"),
        "ENABLED_SOURCES": os.getenv("ENABLED_SOURCES", ""),
    }


class _Config:
    """Lazy configuration that only validates when values are actually accessed."""

    def __init__(self) -> None:
        self._config: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def OUTPUT_PATH(self) -> str:
        return self._load()["OUTPUT_PATH"]

    @property
    def USER_AGENT(self) -> str:
        return self._load()["USER_AGENT"]

    @property
    def HTTP_TIMEOUT(self) -> float:
        """Per-request network timeout in seconds. Must be positive."""
        raw = self._load()["HTTP_TIMEOUT"]
        try:
            timeout = float(raw)
        except ValueError:
            raise ValueError(f"HTTP_TIMEOUT must be a positive number, got '{raw}'") from None
        if timeout <= 0:
            raise ValueError(f"HTTP_TIMEOUT must be a positive number, got {timeout}")
        return timeout

    @property
    def MAX_JOBS(self) -> int:
        """Maximum number of jobs kept in the output document."""
        raw = self._load()["MAX_JOBS"]
        try:
            max_jobs = int(raw)
        except ValueError:
            raise ValueError(f"MAX_JOBS must be a positive integer, got '{raw}'") from None
        if max_jobs <= 0:
            raise ValueError(f"MAX_JOBS must be a positive integer, got {max_jobs}")
        return max_jobs

    @property
    def BEGINNER_FILTER(self) -> bool:
        raw = self._load()["BEGINNER_FILTER"].strip().lower()
        if raw in TRUTHY:
            return True
        if raw in FALSY:
            return False
        raise ValueError(f"BEGINNER_FILTER must be a boolean flag, got '{raw}'")

    @property
    def ENABLED_SOURCES(self) -> list[str]:
        """Comma-separated list of source names to fetch. Empty means all."""
        raw = self._load()["ENABLED_SOURCES"]
        return [name.strip() for name in raw.split(",") if name.strip()]


_cfg = _Config()

# Module-level type declarations for mypy.
# The actual values come from __getattr__ below.
OUTPUT_PATH: str
USER_AGENT: str
HTTP_TIMEOUT: float
MAX_JOBS: int
BEGINNER_FILTER: bool
ENABLED_SOURCES: list[str]

_LAZY_ATTRIBUTES = {
    "OUTPUT_PATH",
    "USER_AGENT",
    "HTTP_TIMEOUT",
    "MAX_JOBS",
    "BEGINNER_FILTER",
    "ENABLED_SOURCES",
}


# Module-level lazy access using __getattr__ (PEP 562).
def __getattr__(name: str) -> str | float | int | bool | list[str]:
    if name in _LAZY_ATTRIBUTES:
        return getattr(_cfg, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
