"""Exception hierarchy for SteamAffinity."""


class SteamAffinityError(Exception):
    """Base class for every error raised by the package."""


class InvalidParametersError(SteamAffinityError):
    """Analysis parameters are missing or malformed; nothing was started."""


class TransportError(SteamAffinityError):
    """A request still failed after all retry attempts."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class AnalysisCancelled(SteamAffinityError):
    """Raised when a cancellation request is observed.

    Cancellation is a normal way for a run to end and is never reported
    as an error.
    """

    def __init__(self, message: str = "Cancelled"):
        super().__init__(message)


class NoSubjectReviewsError(SteamAffinityError):
    """The subject profile yielded no reviews."""


class NoReviewersError(SteamAffinityError):
    """The review feed yielded no reviewers for the target game."""
