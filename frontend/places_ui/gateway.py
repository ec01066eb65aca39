"""
API Gateway Facade.

Every backend call goes through one POST endpoint carrying `{action, payload}`.
Calls are one-shot: no retry, no caching, and no timeout beyond httpx's default.
"""
import logging
from typing import Any, Literal

import httpx
from pydantic import ValidationError

from places_ui.config import settings
from places_ui.logger import logs
from places_ui.models import Place

Action = Literal["findNearbyPlaces", "getPlaceDetails"]


class GatewayError(Exception):
    """The backend answered with a non-success status or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GatewayFormatError(GatewayError):
    """The backend answered successfully but not with the shape the action requires."""
    pass


class ApiGateway:
    def __init__(
        self,
        base_url: str | None = None,
        path: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.BACKEND_URL).rstrip("/")
        self.path = path or settings.GATEWAY_PATH
        # Injected in tests; None means the real network
        self.transport = transport

    async def call(self, action: Action, payload: dict) -> Any:
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
            try:
                response = await client.post(self.path, json={"action": action, "payload": payload})
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"Gateway transport error for {action}: {str(e)}")
                raise GatewayError(f"Could not reach the backend for {action}.") from e

        if not response.is_success:
            message = self._error_message(response)
            logs.log(logging.ERROR, f"Gateway {action} failed with {response.status_code}: {message}")
            raise GatewayError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logs.log(logging.ERROR, f"Gateway {action} returned a non-JSON body")
            raise GatewayError(f"Malformed response for {action}.", status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"Request failed: {response.status_code} {response.reason_phrase}".strip()

    async def find_nearby_places(self, location: str, category: str) -> list[Place]:
        result = await self.call("findNearbyPlaces", {"location": location, "category": category})

        if not isinstance(result, list):
            logs.log(logging.ERROR, "Backend did not return an array of places", extra={"type": type(result).__name__})
            raise GatewayFormatError("Invalid response format from API.")

        try:
            return [Place.model_validate(item) for item in result]
        except ValidationError as e:
            logs.log(logging.ERROR, f"Backend returned malformed places for {category}: {e.error_count()} errors")
            raise GatewayFormatError("Invalid response format from API.") from e

    async def get_place_details(self, place_name: str, location: str) -> str:
        result = await self.call("getPlaceDetails", {"placeName": place_name, "location": location})
        if not isinstance(result, str):
            raise GatewayFormatError("Invalid response format from API.")
        return result
