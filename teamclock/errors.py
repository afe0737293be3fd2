"""Exception types shared by the adapters and the sync jobs."""


class TeamclockError(Exception):
    """Base error for teamclock."""


class UpstreamUnavailable(TeamclockError):
    """An external API returned a malformed or unexpected payload."""


class NotFound(TeamclockError):
    """No row matched a single-row read or update."""


class ConstraintViolation(TeamclockError):
    """The relational backend rejected a write."""


class ConfigurationError(TeamclockError):
    """Required settings are missing."""
