"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.models import DEFAULT_MOTIFS, Motif


class SupabaseConfig(BaseModel):
    """Connection settings for the hosted database."""
    url: str
    api_key: str
    timeout_seconds: int = 30

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """Ensure the project URL is absolute."""
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"url must start with http:// or https://, got {value!r}")
        return value.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class MotifConfig(BaseModel):
    """Appointment type offered on the booking page."""
    label: str
    duration_minutes: int

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure appointment duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    def to_motif(self) -> Motif:
        return Motif(label=self.label, duration_minutes=self.duration_minutes)


def _default_motifs() -> List[MotifConfig]:
    return [
        MotifConfig(label=m.label, duration_minutes=m.duration_minutes)
        for m in DEFAULT_MOTIFS
    ]


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Paris"
    supabase: Optional[SupabaseConfig] = None
    motifs: List[MotifConfig] = Field(default_factory=_default_motifs)
    booking_horizon_days: int = 30

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @field_validator("motifs")
    @classmethod
    def validate_motifs(cls, value: List[MotifConfig]) -> List[MotifConfig]:
        """Ensure at least one motif exists and labels are unique."""
        if not value:
            raise ValueError("At least one motif must be configured")
        seen: set[str] = set()
        for motif in value:
            key = motif.label.lower()
            if key in seen:
                raise ValueError(f"Duplicate motif label detected: {motif.label}")
            seen.add(key)
        return value

    @field_validator("booking_horizon_days")
    @classmethod
    def validate_horizon(cls, value: int) -> int:
        if not 1 <= value <= 365:
            raise ValueError(f"booking_horizon_days must be between 1 and 365, got {value}")
        return value

    def get_motifs(self) -> List[Motif]:
        return [motif.to_motif() for motif in self.motifs]

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

        return cls(**data)


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
