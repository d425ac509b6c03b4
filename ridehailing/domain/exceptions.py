"""Errors surfaced by the ride use cases."""


class RideError(Exception):
    """Base class for every error raised by the ride core."""


class InvalidAccountError(RideError):
    """Raised when an account is missing or lacks the required role."""


class InvalidCoordinatesError(RideError):
    """Raised when a latitude / longitude is out of range."""


class InvalidRouteError(RideError):
    """Raised when origin and destination are the same point."""


class RideNotFoundError(RideError):
    """Raised when a ride cannot be found."""


class InvalidStatusError(RideError):
    """Raised when a ride status change violates the state machine."""

    def __init__(self, message: str = "Invalid status"):
        super().__init__(message)


class ActiveRideExistsError(RideError):
    """Raised when a passenger already has an active ride."""


class PersistenceError(RideError):
    """Raised when the ride store fails."""


class GatewayError(RideError):
    """Raised when an outbound collaborator (account service, queue) fails."""
