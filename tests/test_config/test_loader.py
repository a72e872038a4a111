"""Tests for configuration loading and run mode detection."""
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from regionpicker.config.loader import ConfigLoader, detect_run_mode, parse_image_model, parse_regions
from regionpicker.config.schema import (
    DEFAULT_REGIONS,
    ImageModelChoice,
    ProviderKind,
    RunMode,
    SelectorConfig,
)
from regionpicker.errors import ConfigurationError


def make_session(logged_in=True):
    session = MagicMock()
    session.is_logged_in.return_value = logged_in
    return session


def test_defaults_in_local_mode():
    """No subscription means local mode without probing the session."""
    session = make_session()
    config = ConfigLoader.load({}, session)

    assert config.run_mode == RunMode.LOCAL
    assert config.text_min_capacity == 150
    assert config.image_model == ImageModelChoice.GPT_IMAGE_1
    assert config.image_min_capacity == 1
    assert config.regions == DEFAULT_REGIONS
    assert config.provider == ProviderKind.CLI
    assert config.github_env is None
    session.is_logged_in.assert_not_called()


def test_ci_mode_requires_subscription_and_session():
    env = {"AZURE_SUBSCRIPTION_ID": "sub-123", "GITHUB_ENV": "/tmp/env"}

    config = ConfigLoader.load(env, make_session(logged_in=True))
    assert config.run_mode == RunMode.CI
    assert config.subscription_id == "sub-123"
    assert config.github_env == "/tmp/env"

    config = ConfigLoader.load(env, make_session(logged_in=False))
    assert config.run_mode == RunMode.LOCAL


def test_image_argument_only_used_in_local_mode():
    env = {"IMAGE_MODEL_CHOICE": "gpt-image-1.5"}
    config = ConfigLoader.load(env, make_session(), image_model_arg="none")
    assert config.image_model == ImageModelChoice.NONE

    env["AZURE_SUBSCRIPTION_ID"] = "sub-123"
    config = ConfigLoader.load(env, make_session(), image_model_arg="none")
    assert config.run_mode == RunMode.CI
    assert config.image_model == ImageModelChoice.GPT_IMAGE_1_5


@pytest.mark.parametrize("env, arg", [
    ({"IMAGE_MODEL_CHOICE": "dall-e-3"}, None),
    ({"AZURE_SUBSCRIPTION_ID": "sub-123"}, "gpt-image-2"),
])
def test_invalid_image_model_makes_no_external_calls(env, arg):
    session = make_session()
    with pytest.raises(ConfigurationError, match="Invalid image model choice"):
        ConfigLoader.load(env, session, image_model_arg=arg)
    session.is_logged_in.assert_not_called()


def test_empty_values_fall_back_to_defaults():
    env = {"GPT_MIN_CAPACITY": "", "IMAGE_MODEL_CHOICE": "  ", "AZURE_REGIONS": ""}
    config = ConfigLoader.load(env, make_session())
    assert config.text_min_capacity == 150
    assert config.image_model == ImageModelChoice.GPT_IMAGE_1
    assert config.regions == DEFAULT_REGIONS


@pytest.mark.parametrize("value", ["abc", "1.5", "-3"])
def test_bad_capacity_is_rejected(value):
    session = make_session()
    with pytest.raises(ConfigurationError, match="GPT_MIN_CAPACITY"):
        ConfigLoader.load({"GPT_MIN_CAPACITY": value, "AZURE_SUBSCRIPTION_ID": "sub"}, session)
    session.is_logged_in.assert_not_called()


def test_unknown_provider_is_rejected():
    with pytest.raises(ConfigurationError, match="Invalid quota provider"):
        ConfigLoader.load({"QUOTA_PROVIDER": "rest"}, make_session())


def test_provider_argument_overrides_environment():
    config = ConfigLoader.load({"QUOTA_PROVIDER": "cli"}, make_session(), provider="SDK")
    assert config.provider == ProviderKind.SDK


def test_parse_regions_splits_on_commas_and_spaces():
    assert parse_regions("eastus, westus3,swedencentral  japaneast") == (
        "eastus", "westus3", "swedencentral", "japaneast"
    )
    assert parse_regions(None) == DEFAULT_REGIONS
    with pytest.raises(ConfigurationError):
        parse_regions(" , ,")


def test_parse_image_model():
    assert parse_image_model("gpt-image-1.5").quota_name == "OpenAI.GlobalStandard.gpt-image-1.5"
    assert parse_image_model("none").quota_name is None
    with pytest.raises(ConfigurationError, match="gpt-image-1 gpt-image-1.5 none"):
        parse_image_model("GPT-IMAGE-1")


def test_detect_run_mode_short_circuits_without_subscription():
    session = make_session()
    assert detect_run_mode(None, session) == RunMode.LOCAL
    session.is_logged_in.assert_not_called()
    assert detect_run_mode("sub", session) == RunMode.CI


def test_requirements_order_and_image_none():
    config = SelectorConfig(run_mode=RunMode.LOCAL, text_min_capacity=200, image_min_capacity=5)
    assert list(config.requirements().items()) == [
        ("OpenAI.GlobalStandard.gpt-5.1", 200),
        ("OpenAI.GlobalStandard.gpt-image-1", 5),
    ]

    config = SelectorConfig(run_mode=RunMode.LOCAL, image_model=ImageModelChoice.NONE)
    assert dict(config.requirements()) == {"OpenAI.GlobalStandard.gpt-5.1": 150}


def test_config_is_immutable():
    config = SelectorConfig(run_mode=RunMode.LOCAL)
    with pytest.raises(ValidationError):
        config.text_min_capacity = 10
    with pytest.raises(TypeError):
        config.requirements()["OpenAI.GlobalStandard.gpt-5.1"] = 1


def test_ci_config_without_subscription_is_invalid():
    with pytest.raises(ValidationError):
        SelectorConfig(run_mode=RunMode.CI)
