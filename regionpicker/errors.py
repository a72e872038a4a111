"""Exceptions raised by the region picker."""


class RegionPickerError(Exception):
    """Base class for all region picker errors."""
    pass


class ConfigurationError(RegionPickerError):
    """Raised when the configuration is invalid or incomplete."""
    pass


class AuthenticationError(RegionPickerError):
    """Raised when no usable Azure session or subscription is available."""
    pass


class ProviderUnavailableError(RegionPickerError):
    """Raised when the usage listing for a region cannot be retrieved."""

    def __init__(self, region: str, reason: str):
        self.region = region
        self.reason = reason
        super().__init__(f"Failed to retrieve quota for region {region}: {reason}")
