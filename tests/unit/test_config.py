"""Unit tests for settings loading and validation."""

import pytest

from voucher_minter.config import Settings, get_settings, validate_settings


@pytest.mark.unit
def test_defaults():
    settings = Settings()
    assert settings.stripe_api_base == "https://api.stripe.com/v1"
    assert settings.output_path == "vouchers.txt"
    assert settings.code_length == 6
    assert settings.max_code_retries is None
    assert settings.first_time_transaction is False


@pytest.mark.unit
def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MAX_CODE_RETRIES", "5")
    monkeypatch.setenv("FIRST_TIME_TRANSACTION", "true")

    settings = get_settings()

    assert settings.max_code_retries == 5
    assert settings.first_time_transaction is True


@pytest.mark.unit
def test_explicit_overrides_skip_none(monkeypatch):
    monkeypatch.setenv("OUTPUT_PATH", "from-env.txt")

    assert get_settings(output_path=None).output_path == "from-env.txt"
    assert get_settings(output_path="cli.txt").output_path == "cli.txt"


@pytest.mark.unit
def test_validation_collects_every_error():
    settings = Settings(code_length=0, code_alphabet="A", max_code_retries=-1, http_timeout=0)

    with pytest.raises(ValueError) as exc_info:
        validate_settings(settings)

    message = str(exc_info.value)
    for name in ("CODE_LENGTH", "CODE_ALPHABET", "MAX_CODE_RETRIES", "HTTP_TIMEOUT"):
        assert name in message
