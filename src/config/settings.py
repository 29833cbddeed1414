"""Application settings with environment variable support."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from functools import lru_cache


# Compute base_dir at module level
_BASE_DIR = Path(__file__).parent.parent.parent.resolve()

ENVIRONMENTS = ("dev", "prod")


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CFRSS_",  # CFRSS_COOLDOWN_MINUTES, CFRSS_STORE_ADDR, etc.
        extra="ignore",
    )

    # Paths
    base_dir: Path = _BASE_DIR
    data_dir: Path = _BASE_DIR / "data"

    # Environment: only changes log verbosity and rendering
    environment: str = "dev"

    # Scheduling
    cooldown_minutes: float = 5
    batch_size: int = 100

    # Store
    store_addr: str = f"sqlite:///{_BASE_DIR / 'data'}"
    database_name: str = "cfrss-local"

    # Codeforces API
    codeforces_base_url: str = "https://codeforces.com/api"
    codeforces_timeout_minutes: float = 2
    fetch_max_attempts: int = 1

    @field_validator("environment")
    @classmethod
    def _check_environment(cls, value: str) -> str:
        if value not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of {ENVIRONMENTS}, got {value!r}")
        return value

    @field_validator("batch_size", "fetch_max_attempts")
    @classmethod
    def _check_positive_int(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("cooldown_minutes", "codeforces_timeout_minutes")
    @classmethod
    def _check_positive_duration(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the configured store address and database."""
        addr = self.store_addr.rstrip("/")
        if addr.startswith("sqlite:"):
            return f"{addr}/{self.database_name}.db"
        return f"{addr}/{self.database_name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings from the environment, read on first use."""
    return Settings()
