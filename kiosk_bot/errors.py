"""
Kiosk exceptions.

Conversational problems (nothing matched, ambiguous input, a failed
payment) are states and prompts, not exceptions. These are raised only
when a collaborator misuses the core.
"""


class KioskError(Exception):
    """Base class for kiosk errors."""


class CatalogError(KioskError):
    """Raised when a catalog file cannot be read or is not a catalog."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load catalog from {source}: {reason}")


class InvalidOptionSelection(KioskError, ValueError):
    """Raised when a touch selection does not fit the pending option groups."""

    def __init__(self, group_name: str, reason: str):
        self.group_name = group_name
        self.reason = reason
        super().__init__(f"Invalid selection for option group '{group_name}': {reason}")
