from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

class Place(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    rating: float = Field(..., ge=0, le=5)
    description: str
    address: str
    category_tag: str = Field(..., alias="categoryTag")
    image_url: Optional[str] = Field(None, alias="imageUrl")

class GatewayRequest(BaseModel):
    # Kept as a plain string so unknown actions reach the dispatcher and get a 400
    action: str = Field(..., description="findNearbyPlaces or getPlaceDetails")
    payload: Dict[str, Any] = Field(default_factory=dict)

class FindNearbyPlacesPayload(BaseModel):
    location: str = ""
    category: str = ""

class PlaceDetailsPayload(BaseModel):
    place_name: str = Field("", alias="placeName")
    location: str = ""
