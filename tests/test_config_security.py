from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_default_secret_key_allowed_in_development() -> None:
    settings = Settings(_env_file=None, app_env="development", secret_key="change-me")
    assert settings.secret_key == "change-me"


def test_default_secret_key_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="production", secret_key="change-me")


def test_placeholder_secret_key_prefix_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="prod", secret_key="change-me-in-production")


def test_custom_secret_key_allowed_in_production() -> None:
    settings = Settings(_env_file=None, app_env="production", secret_key="super-secure-value")
    assert settings.secret_key == "super-secure-value"


def test_push_enabled_requires_firebase_credentials_or_project() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, push_enabled=True)


def test_push_enabled_with_firebase_project_is_valid() -> None:
    settings = Settings(_env_file=None, push_enabled=True, push_firebase_project_id="pairslots-dev")
    assert settings.push_firebase_project_id == "pairslots-dev"
    assert settings.push_firebase_credentials_file is None


def test_booking_policies_default_to_permissive_behaviour() -> None:
    settings = Settings(_env_file=None)
    assert settings.booking_allow_requester_approval is True
    assert settings.booking_release_slot_on_cancel is False


def test_allowed_durations_parsed_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SLOT_ALLOWED_DURATIONS", "45, 15,30")

    settings = Settings(_env_file=None)

    assert settings.slot_allowed_durations == (15, 30, 45)


def test_default_allowed_durations() -> None:
    assert Settings(_env_file=None).slot_allowed_durations == (10, 20, 30, 40, 50, 60)


@pytest.mark.parametrize("value", ["", "0,30", "abc"])
def test_invalid_allowed_durations_rejected(value: str) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, slot_allowed_durations=value)
