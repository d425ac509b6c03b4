"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ── Requests ──────────────────────────────────────────────────────────


class RideCreateRequest(BaseModel):
    passenger_id: str
    from_lat: float = Field(..., ge=-90, le=90)
    from_long: float = Field(..., ge=-180, le=180)
    to_lat: float = Field(..., ge=-90, le=90)
    to_long: float = Field(..., ge=-180, le=180)


class RideAcceptRequest(BaseModel):
    driver_id: str


class PositionRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    long: float = Field(..., ge=-180, le=180)


# ── Responses ─────────────────────────────────────────────────────────


class RideCreatedResponse(BaseModel):
    ride_id: str


class RideResponse(BaseModel):
    ride_id: str
    passenger_id: str
    driver_id: Optional[str] = None
    status: str
    fare: float
    distance: float
    from_lat: float
    from_long: float
    to_lat: float
    to_long: float
    date: datetime

    model_config = {"from_attributes": True}


class PositionResponse(BaseModel):
    position_id: str


class RideFinishedResponse(BaseModel):
    ride_id: str
    fare: float
    distance: float

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
