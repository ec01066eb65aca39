import logging
import math
from dataclasses import dataclass
from typing import Union

from places_ui.constants import ALL_CATEGORY, DETAILS_FAILED_ERROR
from places_ui.gateway import ApiGateway, GatewayError
from places_ui.logger import logs
from places_ui.models import GroupedPlaces, Place

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/seed/{seed}/192/288"


def filter_places(grouped: GroupedPlaces, selected_category: str) -> list[tuple[str, list[Place]]]:
    """(category, places) pairs visible under the current filter, in grouping order."""
    return [
        (category, places)
        for category, places in grouped.items()
        if selected_category == ALL_CATEGORY or category == selected_category
    ]


def simple_hash(text: str) -> int:
    """
    Stable 32-bit rolling hash (h * 31 + code unit) of a string.
    Iterates UTF-16 code units so non-BMP names hash the same as in a browser.
    """
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return abs(h)


def placeholder_image_url(place: Place) -> str:
    return PLACEHOLDER_IMAGE_URL.format(seed=simple_hash(place.name))


def star_states(rating: float, total: int = 5) -> list[bool]:
    # Half-up rounding, so 4.5 shows five stars
    filled = math.floor(rating + 0.5)
    return [i < filled for i in range(total)]


# --- Per-card detail disclosure ---
@dataclass(frozen=True)
class Unfetched:
    pass


@dataclass(frozen=True)
class Fetched:
    text: str


@dataclass(frozen=True)
class Failed:
    message: str


DetailState = Union[Unfetched, Fetched, Failed]


class PlaceCard:
    """
    Progressive disclosure for one place. The first expand fetches details; the
    text is kept for the card's lifetime so later expands are free. A failed
    fetch is retried only when the user asks again.
    """

    def __init__(self, place: Place, gateway: ApiGateway):
        self.place = place
        self.gateway = gateway
        self.state: DetailState = Unfetched()
        self.expanded = False
        self.loading = False

    @property
    def details(self) -> str | None:
        if self.expanded and isinstance(self.state, Fetched):
            return self.state.text
        return None

    @property
    def error(self) -> str | None:
        if not self.loading and isinstance(self.state, Failed):
            return self.state.message
        return None

    @property
    def button_label(self) -> str:
        if self.loading:
            return "Loading..."
        return "Hide Details" if self.expanded else "View Details"

    @property
    def image_url(self) -> str:
        return placeholder_image_url(self.place)

    async def toggle(self):
        if self.loading:
            return
        if self.expanded:
            self.expanded = False
            return
        if isinstance(self.state, Fetched):
            self.expanded = True
            return

        self.loading = True
        try:
            text = await self.gateway.get_place_details(self.place.name, self.place.address)
        except GatewayError as e:
            logs.log(logging.ERROR, f"Details fetch failed for {self.place.name}: {e.message}")
            self.state = Failed(DETAILS_FAILED_ERROR)
        else:
            self.state = Fetched(text)
            self.expanded = True
        finally:
            self.loading = False


class CardDeck:
    """PlaceCards for the current result set, keyed by category and list position."""

    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway
        self.generation: int | None = None
        self._cards: dict[str, PlaceCard] = {}

    def sync(self, generation: int):
        """Drop every card when a different search's results are on screen."""
        if generation != self.generation:
            self._cards = {}
            self.generation = generation

    def card(self, category: str, place: Place, index: int) -> PlaceCard:
        key = f"{category}:{place.name}-{index}"
        if key not in self._cards:
            self._cards[key] = PlaceCard(place, self.gateway)
        return self._cards[key]

    def __len__(self) -> int:
        return len(self._cards)
