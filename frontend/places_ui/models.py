from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

class Place(BaseModel):
    """A point of interest as returned by findNearbyPlaces. Frozen once received."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    rating: float = Field(..., ge=0, le=5)
    description: str
    address: str
    category_tag: str = Field(..., alias="categoryTag")
    image_url: Optional[str] = Field(None, alias="imageUrl")

# Category name -> places, in category enumeration order
GroupedPlaces = Dict[str, List[Place]]
