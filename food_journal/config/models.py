"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from food_journal.domain.models import Category


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AuthSettings(BaseModel):
    """Credential rules for the authentication flow."""

    min_password_length: int = Field(
        6, ge=6, le=128, description="Minimum accepted password length"
    )
    hash_iterations: int = Field(
        200_000, ge=10_000, le=5_000_000, description="PBKDF2 iterations for new password hashes"
    )


class ImageSettings(BaseModel):
    """Options passed to the image source when a photo is requested."""

    allows_editing: bool = Field(True, description="Let the user crop the image before use")
    aspect: List[int] = Field(
        default_factory=lambda: [4, 3], description="Crop aspect ratio as [width, height]"
    )
    quality: float = Field(0.8, gt=0.0, le=1.0, description="Compression quality hint (0, 1]")

    @field_validator("aspect")
    @classmethod
    def validate_aspect(cls, v: List[int]) -> List[int]:
        """Aspect must be exactly two positive integers."""
        if len(v) != 2:
            raise ValueError("aspect must contain exactly two values: [width, height]")
        if any(part <= 0 for part in v):
            raise ValueError("aspect values must be positive")
        return v


class JournalSettings(BaseModel):
    """Defaults for the journal management flow."""

    default_category: Category = Field(
        Category.SNACKS, description="Category given to new entries when none is chosen"
    )


class AppConfig(BaseModel):
    """Root configuration object for the food journal application."""

    database_url: Optional[str] = Field(
        None, description="SQLAlchemy URL of the journal database (env overrides this)"
    )
    auth: AuthSettings = Field(default_factory=AuthSettings, description="Authentication rules")
    journal: JournalSettings = Field(
        default_factory=JournalSettings, description="Journal defaults"
    )
    images: ImageSettings = Field(default_factory=ImageSettings, description="Image request options")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: Optional[str]) -> Optional[str]:
        """Only SQLite URLs are supported; blank means "use the default"."""
        if v is None:
            return None
        stripped = v.strip()
        if not stripped:
            return None
        if not stripped.startswith("sqlite"):
            raise ValueError("database_url must be a SQLite URL (sqlite:///path/to/file.db)")
        return stripped
