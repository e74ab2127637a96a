"""Async client for the canister registration API."""

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from canreg.config import Settings
from canreg.contracts import (
    UNKNOWN_ERROR,
    ApiCanisterType,
    CanisterType,
    RegistrationRequest,
    RegistrationResult,
    to_api_type,
)

CANISTERS_PATH = "/canisters"
JSON_HEADERS = {"Content-Type": "application/json"}


def segment(value: str) -> str:
    """Escape a value for use as a single URL path segment"""
    return quote(value, safe="")


class RegistrationClient:
    """Forwards canister registrations to the remote API.

    Every call makes exactly one request on its own connection and resolves to a
    `RegistrationResult`; errors are logged and returned, never raised.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> "RegistrationClient":
        return cls(settings.api_base_url, transport=transport)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self.transport)

    async def register_canister(
        self,
        principal: str,
        canister_id: str,
        canister_type: CanisterType | str,
    ) -> RegistrationResult:
        """Register `canister_id` as owned by `principal`.

        `canister_type` is coerced to `CanisterType`; any other value yields a failed
        result without a request being sent.
        """
        try:
            body = RegistrationRequest(
                principal=principal,
                canister_id=canister_id,
                canister_type=canister_type,
            ).to_wire()
            logger.debug(f"Registering canister {canister_id} as {body.canister_type}")
            async with self._client() as client:
                response = await client.post(
                    CANISTERS_PATH,
                    content=body.model_dump_json(),
                    headers=JSON_HEADERS,
                )
            return self._to_result(response, "Error registering canister")
        except Exception as err:
            return self._from_exception(err, "Error registering canister")

    async def get_canister(self, canister_id: str) -> RegistrationResult:
        """Fetch a registered canister by id."""
        return await self._get("Error fetching canister", canister_id)

    async def list_canisters(
        self, canister_type: CanisterType | ApiCanisterType | str | None = None
    ) -> RegistrationResult:
        """List registered canisters, optionally only those of one type."""
        if canister_type is None:
            return await self._get("Error listing canisters")
        return await self._get(
            "Error listing canisters", "type", to_api_type(canister_type)
        )

    async def _get(self, context: str, *parts: str) -> RegistrationResult:
        """GET `/canisters` followed by `parts`, each escaped as one path segment"""
        try:
            path = "/".join([CANISTERS_PATH, *map(segment, parts)])
            logger.debug(f"GET {self.base_url}{path}")
            async with self._client() as client:
                response = await client.get(path)
            return self._to_result(response, context)
        except Exception as err:
            return self._from_exception(err, context)

    @staticmethod
    def _to_result(response: httpx.Response, context: str) -> RegistrationResult:
        # status code is not surfaced, only the raw body
        if not response.is_success:
            error_text = response.text
            logger.error(f"{context}: {error_text}")
            return RegistrationResult.fail(error_text)
        data: Any = response.json()
        return RegistrationResult.ok(data)

    @staticmethod
    def _from_exception(err: Exception, context: str) -> RegistrationResult:
        logger.opt(exception=err).error(f"{context}: {err!r}")
        return RegistrationResult.fail(str(err) or UNKNOWN_ERROR)


async def register_canister(
    principal: str,
    canister_id: str,
    canister_type: CanisterType | str,
    *,
    settings: Settings | None = None,
) -> RegistrationResult:
    client = RegistrationClient.from_settings(settings or Settings.load())
    return await client.register_canister(principal, canister_id, canister_type)


async def get_canister(
    canister_id: str, *, settings: Settings | None = None
) -> RegistrationResult:
    client = RegistrationClient.from_settings(settings or Settings.load())
    return await client.get_canister(canister_id)


async def list_canisters(
    canister_type: CanisterType | ApiCanisterType | str | None = None,
    *,
    settings: Settings | None = None,
) -> RegistrationResult:
    client = RegistrationClient.from_settings(settings or Settings.load())
    return await client.list_canisters(canister_type)
