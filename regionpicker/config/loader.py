"""Build a SelectorConfig from environment variables and CLI arguments."""
import re
from typing import Mapping, Optional, Tuple

from pydantic import ValidationError

from .schema import DEFAULT_REGIONS, ImageModelChoice, ProviderKind, RunMode, SelectorConfig
from ..errors import ConfigurationError


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Return a stripped variable, treating empty values as unset."""
    value = environ.get(name, "").strip()
    return value or None


def _parse_capacity(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = _env(environ, name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a whole number, got '{raw}'")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


def parse_image_model(value: str) -> ImageModelChoice:
    """Resolve an image model choice, rejecting anything outside the known set.

    Raises:
        ConfigurationError: If the value is not an allowed choice.
    """
    try:
        return ImageModelChoice(value)
    except ValueError:
        allowed = " ".join(ImageModelChoice.allowed_values())
        raise ConfigurationError(f"Invalid image model choice: '{value}'. Allowed values: {allowed}")


def parse_regions(value: Optional[str]) -> Tuple[str, ...]:
    """Split a region list on commas and whitespace.

    Returns the built-in region order when no list is given.
    """
    if value is None:
        return DEFAULT_REGIONS
    regions = tuple(r for r in re.split(r"[,\s]+", value) if r)
    if not regions:
        raise ConfigurationError(f"AZURE_REGIONS does not contain any region: '{value}'")
    return regions


def detect_run_mode(subscription_id: Optional[str], session) -> RunMode:
    """CI mode needs a subscription id and an already authenticated session."""
    if subscription_id and session.is_logged_in():
        return RunMode.CI
    return RunMode.LOCAL


class ConfigLoader:
    """Loads the selector configuration from the process environment."""

    @staticmethod
    def load(
        environ: Mapping[str, str],
        session,
        image_model_arg: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> SelectorConfig:
        """Validate the environment and build the configuration.

        Everything that can be checked locally is validated before the
        session probe used for run mode detection, so a bad value never
        triggers a call to Azure.

        Args:
            environ: Environment variables, usually ``os.environ``.
            session: Object with an ``is_logged_in()`` probe.
            image_model_arg: Positional image model argument, honoured in local mode only.
            provider: Usage provider override; falls back to ``QUOTA_PROVIDER``.

        Returns:
            SelectorConfig: The immutable configuration.

        Raises:
            ConfigurationError: If any value is invalid or required values are missing.
        """
        env_image_model = parse_image_model(_env(environ, "IMAGE_MODEL_CHOICE") or ImageModelChoice.GPT_IMAGE_1.value)
        arg_image_model = parse_image_model(image_model_arg) if image_model_arg else None

        text_min_capacity = _parse_capacity(environ, "GPT_MIN_CAPACITY", 150)
        image_min_capacity = _parse_capacity(environ, "IMAGE_MODEL_MIN_CAPACITY", 1)
        regions = parse_regions(_env(environ, "AZURE_REGIONS"))

        provider_name = provider or _env(environ, "QUOTA_PROVIDER") or ProviderKind.CLI.value
        try:
            provider_kind = ProviderKind(provider_name.lower())
        except ValueError:
            allowed = " ".join(kind.value for kind in ProviderKind)
            raise ConfigurationError(f"Invalid quota provider: '{provider_name}'. Allowed values: {allowed}")

        subscription_id = _env(environ, "AZURE_SUBSCRIPTION_ID")
        run_mode = detect_run_mode(subscription_id, session)

        if run_mode == RunMode.CI:
            image_model = env_image_model
        else:
            image_model = arg_image_model or env_image_model

        try:
            return SelectorConfig(
                run_mode=run_mode,
                subscription_id=subscription_id,
                text_min_capacity=text_min_capacity,
                image_model=image_model,
                image_min_capacity=image_min_capacity,
                regions=regions,
                github_env=_env(environ, "GITHUB_ENV"),
                provider=provider_kind,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")
