"""Pydantic models for the selector configuration."""
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TEXT_MODEL_QUOTA_NAME = "OpenAI.GlobalStandard.gpt-5.1"

DEFAULT_REGIONS: Tuple[str, ...] = (
    "westus3",
    "eastus2",
    "uaenorth",
    "swedencentral",
    "australiaeast",
    "eastus",
    "uksouth",
    "japaneast",
)


class RunMode(str, Enum):
    CI = "ci"
    LOCAL = "local"


class ProviderKind(str, Enum):
    CLI = "cli"
    SDK = "sdk"


class ImageModelChoice(str, Enum):
    """Image models that can be included in the quota check."""
    GPT_IMAGE_1 = "gpt-image-1"
    GPT_IMAGE_1_5 = "gpt-image-1.5"
    NONE = "none"

    @property
    def quota_name(self) -> Optional[str]:
        """Azure quota identifier for this choice, or None for 'none'."""
        return IMAGE_MODEL_QUOTA_NAMES[self]

    @classmethod
    def allowed_values(cls) -> List[str]:
        return [choice.value for choice in cls]


IMAGE_MODEL_QUOTA_NAMES: Dict[ImageModelChoice, Optional[str]] = {
    ImageModelChoice.GPT_IMAGE_1: "OpenAI.GlobalStandard.gpt-image-1",
    ImageModelChoice.GPT_IMAGE_1_5: "OpenAI.GlobalStandard.gpt-image-1.5",
    ImageModelChoice.NONE: None,
}


class SelectorConfig(BaseModel):
    """Immutable configuration for a single selector run."""

    model_config = ConfigDict(frozen=True)

    run_mode: RunMode
    subscription_id: Optional[str] = None
    text_model: str = TEXT_MODEL_QUOTA_NAME
    text_min_capacity: int = Field(default=150, ge=0)
    image_model: ImageModelChoice = ImageModelChoice.GPT_IMAGE_1
    image_min_capacity: int = Field(default=1, ge=0)
    regions: Tuple[str, ...] = DEFAULT_REGIONS
    github_env: Optional[str] = None
    provider: ProviderKind = ProviderKind.CLI

    @field_validator("regions")
    @classmethod
    def _regions_not_empty(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("at least one region must be given")
        return value

    @model_validator(mode="after")
    def _ci_needs_subscription(self) -> "SelectorConfig":
        if self.run_mode == RunMode.CI and not self.subscription_id:
            raise ValueError("AZURE_SUBSCRIPTION_ID is required in CI mode")
        return self

    def requirements(self) -> Mapping[str, int]:
        """Build the model -> minimum capacity map.

        The text model always comes first; the image model is only added
        when one was chosen.
        """
        required = {self.text_model: self.text_min_capacity}
        image_quota_name = self.image_model.quota_name
        if image_quota_name:
            required[image_quota_name] = self.image_min_capacity
        return MappingProxyType(required)
