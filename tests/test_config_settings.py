"""Tests for startup configuration validation."""

from itertools import combinations

import pytest
from pydantic import ValidationError

import tianguistore.main as main_module
from tianguistore.config import (
    AppSettings,
    ConfigurationError,
    config_collect_warnings,
    config_load_settings,
)

REQUIRED_ENVIRONMENT = {
    "DB_HOST": "db.internal",
    "DB_PORT": "5432",
    "DB_USER": "tianguistore",
    "DB_NAME": "tianguistore",
}
OPTIONAL_ENVIRONMENT_KEYS = (
    "DB_PASSWORD",
    "DB_DRIVER",
    "ENVIRONMENT_NAME",
    "APPLICATION_HOST",
    "APPLICATION_PORT",
    "CORS_ORIGIN",
    "PUBLIC_DIRECTORY",
    "ROUTE_GROUPS_FACTORY",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "NODE_ENV",
    "HOST",
    "PORT",
)


def _set_environment(monkeypatch: pytest.MonkeyPatch, missing: tuple[str, ...] = ()) -> None:
    """Populate required keys except the given ones and clear optional keys.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        missing: Required keys to leave unset.
    """

    for key in OPTIONAL_ENVIRONMENT_KEYS:
        monkeypatch.delenv(key, raising=False)
    for key, value in REQUIRED_ENVIRONMENT.items():
        if key in missing:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)


MISSING_SUBSETS = [
    subset
    for size in range(1, len(REQUIRED_ENVIRONMENT) + 1)
    for subset in combinations(REQUIRED_ENVIRONMENT, size)
]


@pytest.mark.parametrize("missing", MISSING_SUBSETS, ids=lambda subset: "+".join(subset))
def test_config_reports_exactly_the_missing_required_keys(
    monkeypatch: pytest.MonkeyPatch, missing: tuple[str, ...]
) -> None:
    """Name every absent required key, in required-key order, and nothing else.

    Raises:
        AssertionError: Raised when the reported keys differ from the absent keys.
    """

    _set_environment(monkeypatch, missing=missing)

    with pytest.raises(ConfigurationError) as error_info:
        config_load_settings(env_file=None)

    assert error_info.value.missing_keys == missing
    for key in missing:
        assert key in str(error_info.value)


def test_config_treats_blank_required_value_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Report a whitespace-only required key as missing.

    Raises:
        AssertionError: Raised when blank values are accepted.
    """

    _set_environment(monkeypatch)
    monkeypatch.setenv("DB_HOST", "   ")
    monkeypatch.setenv("DB_PORT", "")

    with pytest.raises(ConfigurationError) as error_info:
        config_load_settings(env_file=None)

    assert error_info.value.missing_keys == ("DB_HOST", "DB_PORT")


def test_config_defaults_password_to_empty_string(monkeypatch: pytest.MonkeyPatch) -> None:
    """Proceed without DB_PASSWORD and treat the password as empty.

    Raises:
        AssertionError: Raised when defaults are not applied.
    """

    _set_environment(monkeypatch)

    settings = config_load_settings(env_file=None)

    assert settings.db_password == ""
    assert settings.db_host == "db.internal"
    assert settings.db_port == 5432
    assert settings.environment_name == "development"
    assert settings.is_development is True
    assert settings.application_port == 3000
    assert settings.application_host == "localhost"
    assert settings.cors_origin is None


def test_config_rejects_invalid_optional_value_without_missing_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail on an invalid non-required value and report no missing keys.

    Raises:
        AssertionError: Raised when the invalid port is accepted.
    """

    _set_environment(monkeypatch)
    monkeypatch.setenv("APPLICATION_PORT", "not-a-port")

    with pytest.raises(ConfigurationError) as error_info:
        config_load_settings(env_file=None)

    assert error_info.value.missing_keys == ()


def test_config_settings_are_immutable(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reject attribute assignment on loaded settings.

    Raises:
        AssertionError: Raised when settings can be mutated.
    """

    _set_environment(monkeypatch)
    settings = config_load_settings(env_file=None)

    with pytest.raises(ValidationError):
        settings.db_host = "other"


def test_config_mode_is_development_unless_production() -> None:
    """Treat every environment name except `production` as development.

    Raises:
        AssertionError: Raised when mode detection is wrong.
    """

    base = {"_env_file": None, "db_host": "h", "db_port": 5432, "db_user": "u", "db_name": "d"}

    assert AppSettings(environment_name="staging", **base).is_development is True
    assert AppSettings(environment_name="PRODUCTION", **base).is_development is False


def test_config_warns_when_production_has_no_cors_origin() -> None:
    """Warn about a missing CORS origin outside development only.

    Raises:
        AssertionError: Raised when warnings are wrong.
    """

    base = {"_env_file": None, "db_host": "h", "db_port": 5432, "db_user": "u", "db_name": "d"}

    assert config_collect_warnings(AppSettings(environment_name="production", **base))
    assert not config_collect_warnings(
        AppSettings(environment_name="production", cors_origin="https://shop.example", **base)
    )
    assert not config_collect_warnings(AppSettings(environment_name="development", **base))


def test_main_exits_with_status_one_when_configuration_is_missing(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> None:
    """Exit 1 without building the sequencer when required keys are absent.

    Raises:
        AssertionError: Raised when startup continues.
    """

    _set_environment(monkeypatch, missing=("DB_HOST", "DB_NAME"))
    monkeypatch.chdir(tmp_path)

    def _fail_if_called(*_args, **_kwargs):
        raise AssertionError("sequencer must not be created")

    monkeypatch.setattr(main_module, "bootstrap_create_sequencer", _fail_if_called)

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["api"])

    assert exit_info.value.code == 1


def test_config_accepts_legacy_mode_host_and_port_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read `NODE_ENV`, `HOST` and `PORT` when the explicit keys are unset.

    Raises:
        AssertionError: Raised when legacy keys are ignored.
    """

    _set_environment(monkeypatch)
    monkeypatch.setenv("NODE_ENV", "production")
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "8080")

    settings = config_load_settings(env_file=None)

    assert settings.is_development is False
    assert settings.application_host == "0.0.0.0"
    assert settings.application_port == 8080


def test_config_explicit_keys_take_precedence_over_legacy_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prefer `ENVIRONMENT_NAME` and `APPLICATION_PORT` over the legacy keys.

    Raises:
        AssertionError: Raised when the legacy key wins.
    """

    _set_environment(monkeypatch)
    monkeypatch.setenv("NODE_ENV", "development")
    monkeypatch.setenv("ENVIRONMENT_NAME", "production")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("APPLICATION_PORT", "9090")

    settings = config_load_settings(env_file=None)

    assert settings.environment_name == "production"
    assert settings.application_port == 9090
