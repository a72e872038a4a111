"""Data models for quota information."""
import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def truncate_to_int(value: Optional[Decimal]) -> int:
    """Drop the fractional part of a quota value. Missing values count as zero."""
    if value is None:
        return 0
    return int(value)


class UsageName(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    value: Optional[str] = None
    localized_value: Optional[str] = Field(default=None, alias="localizedValue")


class UsageRecord(BaseModel):
    """One entry of `az cognitiveservices usage list`."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    name: Optional[UsageName] = None
    current_value: Optional[Decimal] = Field(default=None, alias="currentValue")
    limit: Optional[Decimal] = None
    unit: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.name.value if self.name else None

    @property
    def used(self) -> int:
        return truncate_to_int(self.current_value)

    @property
    def capacity(self) -> int:
        return truncate_to_int(self.limit)

    @property
    def available(self) -> int:
        """Limit minus usage, both truncated before subtracting."""
        return self.capacity - self.used


class UsageListing:
    """Usage records of one region, indexed by quota identifier."""

    def __init__(self, region: str, records: Iterable[UsageRecord]):
        self.region = region
        self.records: Dict[str, UsageRecord] = {}
        for record in records:
            # First record wins for duplicate identifiers
            if record.identifier and record.identifier not in self.records:
                self.records[record.identifier] = record

    def find(self, identifier: str) -> Optional[UsageRecord]:
        return self.records.get(identifier)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class ModelCheck:
    """Outcome of checking one model's quota in a region."""
    model: str
    required: int
    found: bool
    current_usage: int = 0
    limit: int = 0

    @property
    def available(self) -> int:
        return self.limit - self.current_usage

    @property
    def is_sufficient(self) -> bool:
        return self.found and self.available >= self.required

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "found": self.found,
            "current": self.current_usage,
            "limit": self.limit,
            "available": self.available,
            "required": self.required,
            "sufficient": self.is_sufficient,
        }


@dataclass
class RegionResult:
    """Verdict for a single region."""
    region: str
    listing_available: bool = True
    checks: List[ModelCheck] = field(default_factory=list)
    error: Optional[str] = None

    def is_valid(self) -> bool:
        """A region is valid when its listing was retrieved and every check passed."""
        return self.listing_available and bool(self.checks) and all(c.is_sufficient for c in self.checks)


@dataclass
class RegionAnalysis:
    """Results for every region queried during a run."""
    results: List[RegionResult] = field(default_factory=list)
    selected_region: Optional[str] = None

    @property
    def checked_regions(self) -> List[str]:
        return [r.region for r in self.results]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_region": self.selected_region,
            "regions": {
                result.region: {
                    "listing_available": result.listing_available,
                    "valid": result.is_valid(),
                    "error": result.error,
                    "models": [check.to_dict() for check in result.checks],
                } for result in self.results
            },
        }

    def save(self, output_path: str) -> None:
        """Save the analysis to a JSON file.

        Args:
            output_path: Path to write the JSON file.
        """
        with open(output_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
