"""
Exception types for the farm dashboard core.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class SettingsError(DashboardError):
    """Raised when a settings file or mapping cannot be applied."""


class RegistrationError(DashboardError):
    """Raised when farm registration data is incomplete or malformed."""


class DatasetFetchError(DashboardError):
    """Raised when a dataset source fails after all retry attempts."""

    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
