import html
import uuid
from urllib.parse import quote

from places_ui.constants import PLACE_ZOOM, WORLD_LOCATION, WORLD_ZOOM
from places_ui.models import Place

EMBED_URL = "https://maps.google.com/maps?q={query}&t=&z={zoom}&ie=UTF8&iwloc=&output=embed"

# Must stay below the results reveal delay
TRANSITION_MS = 1500


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe="-_.!~*'()")


def build_embed_url(location: str, zoom: int) -> str:
    return EMBED_URL.format(query=encode_uri_component(location), zoom=zoom)


def place_embed_url(place: Place) -> str:
    """Close-up map for an expanded place card."""
    return build_embed_url(f"{place.name}, {place.address}", PLACE_ZOOM)


class MapDisplay:
    """
    Background map. The frame is created once and only its `src` changes, so a
    zoom/blur transition running on the wrapper is not interrupted by a
    location swap.
    """

    def __init__(self, location: str = WORLD_LOCATION, zoom: int = WORLD_ZOOM):
        self.frame_id = f"map-{uuid.uuid4().hex[:8]}"
        self.src = build_embed_url(location, zoom)
        self.is_zooming = False

    def update(self, location: str, zoom: int, is_zooming: bool = False) -> bool:
        """Point the frame at a new target. Returns True when the source changed."""
        src = build_embed_url(location, zoom)
        changed = src != self.src
        self.src = src
        self.is_zooming = is_zooming
        return changed

    @property
    def css_classes(self) -> str:
        return "scale-125 blur-md" if self.is_zooming else "scale-100 blur-none"

    @property
    def wrapper_style(self) -> str:
        transform = "scale(1.25)" if self.is_zooming else "scale(1)"
        blur = "blur(12px)" if self.is_zooming else "blur(0)"
        return (
            f"transition: all {TRANSITION_MS}ms ease-in-out; "
            f"transform: {transform}; filter: {blur};"
        )

    def to_html(self, height: int = 600) -> str:
        return (
            f'<div class="map-wrapper {self.css_classes}" style="{self.wrapper_style}">'
            f'<iframe id="{self.frame_id}" title="Location Map" src="{html.escape(self.src)}" '
            f'width="100%" height="{height}" style="border:0" loading="lazy" allowfullscreen '
            f'referrerpolicy="no-referrer-when-downgrade"></iframe>'
            "</div>"
        )


def place_map_html(place: Place, height: int = 192) -> str:
    """Iframe markup for the close-up map inside an expanded card."""
    return (
        f'<iframe title="{html.escape(f"Map of {place.name}")}" src="{html.escape(place_embed_url(place))}" '
        f'width="100%" height="{height}" style="border:0" loading="lazy" allowfullscreen '
        f'referrerpolicy="no-referrer-when-downgrade"></iframe>'
    )
