"""
SQLAlchemy ORM models.

Tables
------
* ``rides``      -- one row per booking, never deleted
* ``positions``  -- tracked points of rides in progress

Indexes
-------
* **B-Tree** on ``status``, ``passenger_id`` and ``driver_id`` for the
  active-ride lookup and on ``positions.ride_id`` for trip replay.
* **Partial unique** on ``passenger_id`` over active rides, so two
  concurrent requests from one passenger cannot both insert.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    String,
    text,
)

from .database import Base
from ridehailing.domain.enums import RideStatus


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# At most one requested / accepted / in_progress ride per passenger
ACTIVE_RIDE_WHERE = text("status IN ('requested', 'accepted', 'in_progress')")
ACTIVE_PASSENGER_INDEX = "uq_rides_active_passenger"


class RideModel(Base):
    __tablename__ = "rides"

    ride_id = Column(String(36), primary_key=True)
    passenger_id = Column(String(36), nullable=False)
    driver_id = Column(String(36), nullable=True)

    status = Column(
        Enum(
            RideStatus,
            name="ride_status",
            native_enum=False,
            length=20,
            values_callable=_enum_values,
        ),
        default=RideStatus.REQUESTED,
        nullable=False,
    )

    from_lat = Column(Float, nullable=False)
    from_long = Column(Float, nullable=False)
    to_lat = Column(Float, nullable=False)
    to_long = Column(Float, nullable=False)

    distance = Column(Float, nullable=False)
    fare = Column(Float, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_rides_status", "status"),
        Index("idx_rides_passenger", "passenger_id"),
        Index("idx_rides_driver", "driver_id"),
        Index(
            ACTIVE_PASSENGER_INDEX,
            "passenger_id",
            unique=True,
            postgresql_where=ACTIVE_RIDE_WHERE,
            sqlite_where=ACTIVE_RIDE_WHERE,
        ),
    )


class PositionModel(Base):
    __tablename__ = "positions"

    position_id = Column(String(36), primary_key=True)
    ride_id = Column(String(36), ForeignKey("rides.ride_id"), nullable=False)
    lat = Column(Float, nullable=False)
    long = Column(Float, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_positions_ride", "ride_id"),)
