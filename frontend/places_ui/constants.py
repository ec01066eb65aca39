ALL_CATEGORY = "All"

CATEGORIES: list[str] = [ALL_CATEGORY, "Restaurants", "Cafes", "Parks", "Museums", "Shops"]

WORLD_LOCATION = "world"
WORLD_ZOOM = 2
SEARCH_ZOOM = 14
PLACE_ZOOM = 15

SEARCH_VALIDATION_ERROR = "Please enter a location to search."
NO_PLACES_ERROR = "No places found for this location. Please try another search."
FETCH_FAILED_ERROR = "Could not fetch places. Please try again later."
DETAILS_FAILED_ERROR = "Failed to load details. Please try again."
