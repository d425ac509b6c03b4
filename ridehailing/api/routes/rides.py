"""
Ride endpoints
==============

POST /api/v1/rides                      -- request a ride
GET  /api/v1/rides/{ride_id}            -- current status, driver and fare
POST /api/v1/rides/{ride_id}/accept     -- driver accepts a requested ride
POST /api/v1/rides/{ride_id}/start      -- driver picked the passenger up
POST /api/v1/rides/{ride_id}/positions  -- live tracking point
POST /api/v1/rides/{ride_id}/finish     -- complete the trip
POST /api/v1/rides/{ride_id}/cancel     -- cancel before the trip starts
"""

from fastapi import APIRouter, Depends, Request, Response

from ridehailing.api.dependencies import (
    get_account_gateway,
    get_position_repository,
    get_pricing,
    get_queue,
    get_ride_repository,
)
from ridehailing.api.middleware import limiter
from ridehailing.api.schemas import (
    PositionRequest,
    PositionResponse,
    RideAcceptRequest,
    RideCreateRequest,
    RideCreatedResponse,
    RideFinishedResponse,
    RideResponse,
)
from ridehailing.application.accept_ride import AcceptRide, AcceptRideInput
from ridehailing.application.get_ride import GetRide
from ridehailing.application.ports import (
    AccountGateway,
    PositionRepository,
    Queue,
    RideRepository,
)
from ridehailing.application.request_ride import RequestRide, RequestRideInput
from ridehailing.application.trip import (
    CancelRide,
    FinishRide,
    StartRide,
    UpdatePosition,
    UpdatePositionInput,
)
from ridehailing.domain.pricing import PricingEngine

router = APIRouter(prefix="/rides", tags=["rides"])


@router.post(
    "",
    status_code=201,
    response_model=RideCreatedResponse,
    summary="Request a ride",
)
@limiter.limit("100/minute")
async def request_ride(
    request: Request,
    body: RideCreateRequest,
    accounts: AccountGateway = Depends(get_account_gateway),
    rides: RideRepository = Depends(get_ride_repository),
    pricing: PricingEngine = Depends(get_pricing),
):
    ride_id = await RequestRide(accounts, rides, pricing).execute(
        RequestRideInput(**body.model_dump())
    )
    return RideCreatedResponse(ride_id=ride_id)


@router.get(
    "/{ride_id}",
    response_model=RideResponse,
    summary="Get ride status, driver and fare",
)
@limiter.limit("100/minute")
async def get_ride(
    request: Request,
    ride_id: str,
    rides: RideRepository = Depends(get_ride_repository),
):
    output = await GetRide(rides).execute(ride_id)
    return RideResponse.model_validate(output)


@router.post(
    "/{ride_id}/accept",
    status_code=204,
    summary="Accept a requested ride",
    responses={409: {"description": "Ride was already accepted."}},
)
@limiter.limit("100/minute")
async def accept_ride(
    request: Request,
    ride_id: str,
    body: RideAcceptRequest,
    accounts: AccountGateway = Depends(get_account_gateway),
    rides: RideRepository = Depends(get_ride_repository),
):
    await AcceptRide(accounts, rides).execute(
        AcceptRideInput(ride_id=ride_id, driver_id=body.driver_id)
    )
    return Response(status_code=204)


@router.post("/{ride_id}/start", status_code=204, summary="Start the trip")
@limiter.limit("100/minute")
async def start_ride(
    request: Request,
    ride_id: str,
    rides: RideRepository = Depends(get_ride_repository),
):
    await StartRide(rides).execute(ride_id)
    return Response(status_code=204)


@router.post(
    "/{ride_id}/positions",
    status_code=201,
    response_model=PositionResponse,
    summary="Record a tracking point",
)
@limiter.limit("600/minute")
async def update_position(
    request: Request,
    ride_id: str,
    body: PositionRequest,
    rides: RideRepository = Depends(get_ride_repository),
    positions: PositionRepository = Depends(get_position_repository),
):
    position_id = await UpdatePosition(rides, positions).execute(
        UpdatePositionInput(ride_id=ride_id, lat=body.lat, long=body.long)
    )
    return PositionResponse(position_id=position_id)


@router.post(
    "/{ride_id}/finish",
    response_model=RideFinishedResponse,
    summary="Complete the trip",
)
@limiter.limit("100/minute")
async def finish_ride(
    request: Request,
    ride_id: str,
    rides: RideRepository = Depends(get_ride_repository),
    positions: PositionRepository = Depends(get_position_repository),
    queue: Queue = Depends(get_queue),
):
    output = await FinishRide(rides, positions, queue).execute(ride_id)
    return RideFinishedResponse.model_validate(output)


@router.post(
    "/{ride_id}/cancel",
    status_code=204,
    summary="Cancel a ride",
    description="Only requested or accepted rides can be cancelled.",
)
@limiter.limit("100/minute")
async def cancel_ride(
    request: Request,
    ride_id: str,
    rides: RideRepository = Depends(get_ride_repository),
):
    await CancelRide(rides).execute(ride_id)
    return Response(status_code=204)
