"""Ride status enumeration and state-transition rules."""

import enum


class RideStatus(str, enum.Enum):
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# State machine: maps current status -> set of valid next statuses
RIDE_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.REQUESTED: {RideStatus.ACCEPTED, RideStatus.CANCELLED},
    RideStatus.ACCEPTED: {RideStatus.IN_PROGRESS, RideStatus.CANCELLED},
    RideStatus.IN_PROGRESS: {RideStatus.COMPLETED},
    RideStatus.COMPLETED: set(),
    RideStatus.CANCELLED: set(),
}

# A passenger may hold at most one ride in one of these states
ACTIVE_STATUSES = frozenset(
    {RideStatus.REQUESTED, RideStatus.ACCEPTED, RideStatus.IN_PROGRESS}
)

# Statuses that require an assigned driver
DRIVER_ASSIGNED_STATUSES = frozenset(
    {RideStatus.ACCEPTED, RideStatus.IN_PROGRESS, RideStatus.COMPLETED}
)


def can_transition(current: RideStatus, new: RideStatus) -> bool:
    return new in RIDE_TRANSITIONS.get(current, set())
