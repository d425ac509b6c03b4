"""
Tests for the outbound adapters: account service over HTTP (mocked with
``httpx.MockTransport``) and the Redis event queue (mocked Redis).
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from ridehailing.domain.exceptions import GatewayError
from ridehailing.infrastructure.account_gateway import AccountGatewayHttp
from ridehailing.infrastructure.queue import RedisQueue

DRIVER = {
    "accountId": "00000000-0000-4000-8000-000000000002",
    "name": "Jane Roe",
    "email": "jane.roe@example.com",
    "isPassenger": False,
    "isDriver": True,
    "carPlate": "AAA9999",
}


def account_service(request: httpx.Request) -> httpx.Response:
    if request.method == "POST" and request.url.path == "/signup":
        return httpx.Response(200, json={"accountId": DRIVER["accountId"]})
    if request.url.path == f"/accounts/{DRIVER['accountId']}":
        return httpx.Response(200, json=DRIVER)
    if request.url.path.startswith("/accounts/"):
        return httpx.Response(404, json={"message": "Account not found"})
    return httpx.Response(500)


def make_gateway(handler=account_service) -> AccountGatewayHttp:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://accounts.test"
    )
    return AccountGatewayHttp(client=client)


class TestAccountGatewayHttp:
    @pytest.mark.asyncio
    async def test_signup_returns_account_id(self):
        gateway = make_gateway()
        assert await gateway.signup({"name": "Jane Roe"}) == DRIVER["accountId"]
        await gateway.aclose()

    @pytest.mark.asyncio
    async def test_get_by_id_maps_roles(self):
        gateway = make_gateway()
        account = await gateway.get_by_id(DRIVER["accountId"])
        assert account.is_driver
        assert not account.is_passenger
        assert account.car_plate == "AAA9999"
        await gateway.aclose()

    @pytest.mark.asyncio
    async def test_unknown_account_is_none(self):
        gateway = make_gateway()
        assert await gateway.get_by_id("missing") is None
        await gateway.aclose()

    @pytest.mark.asyncio
    async def test_server_error_becomes_gateway_error(self):
        gateway = make_gateway(lambda request: httpx.Response(503))
        with pytest.raises(GatewayError):
            await gateway.get_by_id(DRIVER["accountId"])
        await gateway.aclose()

    @pytest.mark.asyncio
    async def test_transport_error_becomes_gateway_error(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = make_gateway(unreachable)
        with pytest.raises(GatewayError):
            await gateway.signup({"name": "Jane Roe"})
        await gateway.aclose()


class TestRedisQueue:
    @pytest.mark.asyncio
    async def test_publish_sends_json_on_event_channel(self):
        mock_redis = AsyncMock()
        mock_redis.publish = AsyncMock(return_value=1)

        queue = RedisQueue(mock_redis)
        await queue.publish("ride_completed", {"ride_id": "r1", "fare": 26.0})

        channel, message = mock_redis.publish.await_args.args
        assert channel == "rides.ride_completed"
        assert json.loads(message) == {"ride_id": "r1", "fare": 26.0}

    @pytest.mark.asyncio
    async def test_redis_failure_becomes_gateway_error(self):
        mock_redis = AsyncMock()
        mock_redis.publish = AsyncMock(side_effect=RedisConnectionError("down"))

        with pytest.raises(GatewayError):
            await RedisQueue(mock_redis).publish("ride_completed", {})
