"""
HTTP adapter for the external account service.

Endpoints used
--------------
POST /signup              -- returns ``{"accountId": ...}``
GET  /accounts/{id}       -- returns the account, 404 when unknown

Transport failures and unexpected status codes become ``GatewayError``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ridehailing.application.ports import Account, AccountGateway
from ridehailing.config import settings
from ridehailing.domain.exceptions import GatewayError

logger = logging.getLogger(__name__)


class AccountGatewayHttp(AccountGateway):
    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.client = client or httpx.AsyncClient(
            base_url=base_url or settings.account_service_url,
            timeout=settings.account_service_timeout_seconds,
        )

    async def signup(self, profile: dict[str, Any]) -> str:
        response = await self._request("POST", "/signup", json=profile)
        return response.json()["accountId"]

    async def get_by_id(self, account_id: str) -> Optional[Account]:
        response = await self._request(
            "GET", f"/accounts/{account_id}", allow_not_found=True
        )
        if response.status_code == 404:
            return None
        data = response.json()
        return Account(
            account_id=data["accountId"],
            name=data.get("name", ""),
            email=data.get("email", ""),
            is_passenger=bool(data.get("isPassenger", False)),
            is_driver=bool(data.get("isDriver", False)),
            car_plate=data.get("carPlate"),
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(
        self, method: str, url: str, allow_not_found: bool = False, **kwargs
    ) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
            if not (allow_not_found and response.status_code == 404):
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("Account service call %s %s failed", method, url)
            raise GatewayError(f"Account service error on {method} {url}") from exc
        return response
