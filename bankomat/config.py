"""Configuration management for bankomat."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from bankomat.exceptions import ConfigurationError


@dataclass
class StorageConfig:
    """Flat-file storage configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    pretty_json: bool = True


@dataclass
class AtmConfig:
    """Terminal behaviour configuration."""

    max_pin_tries: int = 3
    history_limit: int = 10
    currency: str = "PLN"


@dataclass
class BankomatConfig:
    """Main configuration for bankomat."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    atm: AtmConfig = field(default_factory=AtmConfig)
    log_level: str = "WARNING"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "BankomatConfig":
        """Create config from environment variables."""
        storage = StorageConfig(
            data_dir=Path(os.getenv("BANKOMAT_DATA_DIR", "data")),
            pretty_json=os.getenv("BANKOMAT_PRETTY_JSON", "true").lower() == "true",
        )

        atm = AtmConfig(
            max_pin_tries=_positive_int("BANKOMAT_MAX_PIN_TRIES", 3),
            history_limit=_positive_int("BANKOMAT_HISTORY_LIMIT", 10),
            currency=os.getenv("BANKOMAT_CURRENCY", "PLN"),
        )

        return cls(
            storage=storage,
            atm=atm,
            log_level=os.getenv("LOG_LEVEL", "WARNING"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _positive_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value
