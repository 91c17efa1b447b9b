class MeetpointError(Exception):
    """Base class for errors raised by the meetup planning core."""


class InvalidInput(MeetpointError, ValueError):
    """Caller passed something the core cannot work with (e.g. no points)."""


class TransportFailure(MeetpointError):
    """A remote service could not be reached or answered with an error."""


class SearchSuperseded(MeetpointError):
    """A newer search for the same session replaced this one."""


class DuplicateInterest(MeetpointError):
    """The user already has an interest with this name (case-insensitive)."""
