class HideSiteError(Exception):
    """Base gating exception."""


class ConfigurationError(HideSiteError):
    """Raised for malformed hiding options on the write path."""


class TargetUnresolvable(HideSiteError):
    """Raised when a redirect page no longer maps to a URL."""
