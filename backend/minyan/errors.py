"""Domain exceptions raised by the service layer.

Routers let these propagate; ``minyan.main`` maps them to HTTP responses.
Lookups that find nothing return ``None`` instead of raising.
"""


class MinyanError(Exception):
    """Base class for all service-layer failures."""


class ValidationError(MinyanError):
    """Caller-supplied parameters violate an invariant. Nothing was written."""


class PersistenceError(MinyanError):
    """The store rejected a read, write, or batch. Never retried by the core."""


class NotificationError(MinyanError):
    """A messaging gateway rejected the request or could not be reached."""


class NotificationConfigError(NotificationError):
    """Gateway credentials are missing from the settings."""
