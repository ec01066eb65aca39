import logging
from pydantic import ValidationError
from places_api.models.places_model import (
    Place,
    FindNearbyPlacesPayload,
    PlaceDetailsPayload
)
from places_api.core.exceptions import PlaceQueryError
from places_api.core.llm_connection import LLMService
from places_api.core.logger import logs

class PlaceQueryService:
    """
    Serves the two gateway actions on top of the LLM service.
    Bad payloads raise PlaceQueryError(400); provider failures propagate to the route.
    """

    def __init__(self, llm: LLMService):
        self.llm = llm

    async def dispatch(self, action: str, payload: dict):
        if action == "findNearbyPlaces":
            return await self.find_nearby_places(payload)
        elif action == "getPlaceDetails":
            return await self.get_place_details(payload)
        raise PlaceQueryError("Invalid action specified")

    async def find_nearby_places(self, payload: dict) -> list[dict]:
        try:
            request = FindNearbyPlacesPayload(**payload)
        except ValidationError:
            request = None
        if request is None or not request.location or not request.category:
            raise PlaceQueryError("Location and category are required.")

        logs.log(logging.INFO, f"Finding {request.category} near {request.location}")
        raw_places = await self.llm.find_nearby_places(request.location, request.category)

        places = []
        for item in raw_places:
            try:
                places.append(Place.model_validate(item).model_dump(by_alias=True, exclude_none=True))
            except ValidationError as e:
                logs.log(logging.WARNING, f"Dropping malformed place for {request.category}", extra={"errors": e.error_count()})

        return places

    async def get_place_details(self, payload: dict) -> str:
        try:
            request = PlaceDetailsPayload(**payload)
        except ValidationError:
            request = None
        if request is None or not request.place_name or not request.location:
            raise PlaceQueryError("Place name and location are required.")

        logs.log(logging.INFO, f"Fetching details for {request.place_name}")
        return await self.llm.get_place_details(request.place_name, request.location)
