"""
Collaborator interfaces consumed by the use cases.

Each port is an ABC with one adapter per backing technology under
``ridehailing.infrastructure``.  Use cases receive them through their
constructors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ridehailing.domain.entities import Position, Ride
from ridehailing.domain.enums import RideStatus


@dataclass(frozen=True)
class Account:
    account_id: str
    name: str = ""
    email: str = ""
    is_passenger: bool = False
    is_driver: bool = False
    car_plate: Optional[str] = None


class AccountGateway(ABC):
    @abstractmethod
    async def signup(self, profile: dict[str, Any]) -> str:
        """Create an account and return its id."""

    @abstractmethod
    async def get_by_id(self, account_id: str) -> Optional[Account]: ...


class RideRepository(ABC):
    @abstractmethod
    async def save(self, ride: Ride) -> None:
        """Insert a new ride; ``ActiveRideExistsError`` if the passenger
        already holds an active one."""

    @abstractmethod
    async def get_by_id(self, ride_id: str) -> Optional[Ride]: ...

    @abstractmethod
    async def update(self, ride: Ride, expected_status: RideStatus) -> None:
        """
        Persist *ride* only if the stored status still equals
        *expected_status*; raise ``InvalidStatusError`` otherwise.
        """

    @abstractmethod
    async def has_active_ride_by_passenger_id(self, passenger_id: str) -> bool: ...


class PositionRepository(ABC):
    @abstractmethod
    async def save(self, position: Position) -> None:
        """
        Persist *position* only while its ride is ``in_progress``, checked
        in the same transaction; raise ``InvalidStatusError`` otherwise.
        """

    @abstractmethod
    async def list_by_ride_id(self, ride_id: str) -> list[Position]: ...


class Queue(ABC):
    @abstractmethod
    async def publish(self, event: str, payload: dict[str, Any]) -> None: ...
