"""Centralized configuration for Voucher Minter.

Loads all configuration from environment variables with sensible defaults.
"""

from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

DEFAULT_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"


class Settings(BaseSettings):
    """Runtime settings for a minting run."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Stripe API
    stripe_api_base: str = Field(default="https://api.stripe.com/v1", description="Stripe REST base URL")
    stripe_api_key: str = Field(default="", description="Secret key; prompted for when empty")
    http_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")

    # Output
    output_path: str = Field(default="vouchers.txt", description="File receiving one code per line")

    # Promotion codes
    code_length: int = Field(default=6)
    code_alphabet: str = Field(default=DEFAULT_CODE_ALPHABET)
    max_code_retries: Optional[int] = Field(
        default=None, description="Rejected attempts tolerated before giving up (None = unbounded)"
    )
    first_time_transaction: bool = Field(
        default=False, description="Restrict promotion codes to first-time customers"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")
    log_format: Literal["json", "text"] = Field(default="text")


def get_settings(**overrides) -> Settings:
    """Build settings from the environment, applying non-None overrides."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)


def validate_settings(settings: Settings) -> None:
    """Validate that settings describe a usable run.

    Args:
        settings: The settings to check.

    Raises:
        ValueError: If any setting is out of range.
    """
    errors = []

    if settings.code_length <= 0:
        errors.append("CODE_LENGTH must be greater than zero")
    if len(set(settings.code_alphabet)) < 2:
        errors.append("CODE_ALPHABET must contain at least two distinct symbols")
    if settings.max_code_retries is not None and settings.max_code_retries < 0:
        errors.append("MAX_CODE_RETRIES must not be negative")
    if settings.http_timeout <= 0:
        errors.append("HTTP_TIMEOUT must be greater than zero")
    if not settings.output_path:
        errors.append("OUTPUT_PATH must not be empty")

    if errors:
        error_msg = "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
