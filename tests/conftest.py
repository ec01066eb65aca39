import pytest
from unittest.mock import AsyncMock, MagicMock

from places_ui.gateway import ApiGateway
from places_ui.models import Place


def build_place(name: str = "The Daily Grind", rating: float = 4.5, tag: str = "Café", address: str = "123 Coffee St, 0.5 mi") -> Place:
    return Place(
        name=name,
        rating=rating,
        description=f"A brief description of {name}.",
        address=address,
        categoryTag=tag,
    )


@pytest.fixture
def place_factory():
    """Build client-side Place models with sensible defaults."""
    return build_place


@pytest.fixture
def fake_gateway():
    """Gateway double; tests set side effects on its async methods."""
    gateway = MagicMock(spec=ApiGateway)
    gateway.find_nearby_places = AsyncMock(return_value=[])
    gateway.get_place_details = AsyncMock(return_value="")
    return gateway


@pytest.fixture
def place_payload():
    """One place as the model returns it on the wire."""
    def _make(name: str = "Bistro Éclair", rating: float = 4.5):
        return {
            "name": name,
            "rating": rating,
            "description": "Modern French cuisine with outdoor seating.",
            "address": "456 Patiserie Ave, 1.2 mi",
            "categoryTag": "Food",
        }
    return _make
