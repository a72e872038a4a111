"""Shared fixtures for the region picker tests."""
import io

import pytest
from rich.console import Console

from regionpicker.errors import ProviderUnavailableError
from regionpicker.quota.models import UsageListing, UsageRecord
from regionpicker.quota.providers import UsageProvider

GPT = "OpenAI.GlobalStandard.gpt-5.1"
IMAGE = "OpenAI.GlobalStandard.gpt-image-1"

ENV_VARS = [
    "AZURE_SUBSCRIPTION_ID",
    "GPT_MIN_CAPACITY",
    "IMAGE_MODEL_CHOICE",
    "IMAGE_MODEL_MIN_CAPACITY",
    "AZURE_REGIONS",
    "GITHUB_ENV",
    "QUOTA_PROVIDER",
]


def usage(name, current, limit):
    """Build one usage entry the way `az cognitiveservices usage list` prints it."""
    return {
        "currentValue": current,
        "limit": limit,
        "name": {"localizedValue": name, "value": name},
        "unit": "Count",
    }


class FakeProvider(UsageProvider):
    """Returns canned listings and remembers which regions were queried."""

    def __init__(self, listings, console=None):
        super().__init__(console=console)
        self.listings = listings
        self.calls = []

    def list_usage(self, region):
        self.calls.append(region)
        items = self.listings.get(region)
        if not items:
            raise ProviderUnavailableError(region, "no usage listing")
        return UsageListing(region, [UsageRecord.model_validate(i) for i in items])


@pytest.fixture
def quiet_console():
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the loader reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
