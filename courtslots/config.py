"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.price_calculator import BASE_PRICE_LABEL
from .domain.time_arithmetic import MINUTES_PER_DAY
from .services.availability import CLOSED_MESSAGE, DEFAULT_ACTIVE_STATUSES


class DefaultsConfig(BaseModel):
    """Default settings for availability searches."""
    duration_minutes: int = 60
    slot_step_minutes: int = 30

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure the default slot duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    @field_validator("slot_step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure candidate starts land on the same clock times every day."""
        if value <= 0 or MINUTES_PER_DAY % value:
            raise ValueError(
                f"slot_step_minutes must be a positive divisor of {MINUTES_PER_DAY}, got {value}"
            )
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/Argentina/Buenos_Aires"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    active_booking_statuses: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ACTIVE_STATUSES)
    )
    base_price_label: str = BASE_PRICE_LABEL
    closed_message: str = CLOSED_MESSAGE
    snapshot_path: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject unknown IANA timezone names."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("active_booking_statuses")
    @classmethod
    def validate_statuses(cls, value: List[str]) -> List[str]:
        """Ensure at least one status counts as a conflict, deduplicated."""
        seen: set[str] = set()
        deduped: List[str] = []
        for status in value:
            key = status.strip().lower()
            if key and key not in seen:
                deduped.append(key)
                seen.add(key)
        if not deduped:
            raise ValueError("active_booking_statuses must not be empty")
        return deduped

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative snapshot paths are resolved against the config file
        if config.snapshot_path is not None and not config.snapshot_path.is_absolute():
            config.snapshot_path = (config_path.parent / config.snapshot_path).resolve()

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
