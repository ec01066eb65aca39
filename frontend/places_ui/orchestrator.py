"""
Search Orchestrator.

Drives the three-phase view (search -> loading -> results):

1. `search()` validates the query and moves the view to LOADING.
2. A short timer swaps the map target so the zoom animation starts on the old map.
3. One findNearbyPlaces call per category is issued concurrently and joined
   all-settled; failed or empty categories are dropped.
4. A second timer, longer than the map transition, reveals the results.

Every search gets a generation number. Timer callbacks and late branch results
carry the generation they were started for and are ignored once a newer search
(or a return to the search view) has happened.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from places_ui.config import settings
from places_ui.constants import (
    ALL_CATEGORY,
    CATEGORIES,
    FETCH_FAILED_ERROR,
    NO_PLACES_ERROR,
    SEARCH_VALIDATION_ERROR,
    SEARCH_ZOOM,
    WORLD_LOCATION,
    WORLD_ZOOM,
)
from places_ui.gateway import ApiGateway
from places_ui.logger import logs
from places_ui.models import GroupedPlaces, Place
from places_ui.presentation import filter_places


class ViewState(str, Enum):
    SEARCH = "search"
    LOADING = "loading"
    RESULTS = "results"


@dataclass(frozen=True)
class MapTarget:
    location: str
    zoom: int


WORLD_MAP = MapTarget(WORLD_LOCATION, WORLD_ZOOM)


class SearchStateMachine:
    """
    Holds all view state for one session. Fields only change through the
    transition methods; each generation-scoped method returns False and does
    nothing when called for a superseded generation.
    """

    def __init__(self, categories: Iterable[str] = CATEGORIES):
        self.categories = list(categories)
        self.view = ViewState.SEARCH
        self.query = ""
        self.places: GroupedPlaces = {}
        self.error: str | None = None
        self.selected_category = ALL_CATEGORY
        self.map_target = WORLD_MAP
        self.generation = 0
        self._settled: GroupedPlaces = {}

    @property
    def query_categories(self) -> list[str]:
        return [c for c in self.categories if c != ALL_CATEGORY]

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def reject_query(self, message: str = SEARCH_VALIDATION_ERROR):
        self.error = message

    def start(self, query: str) -> int:
        self.generation += 1
        self.query = query
        self.view = ViewState.LOADING
        self.error = None
        self.places = {}
        self._settled = {}
        self.selected_category = ALL_CATEGORY
        return self.generation

    def swap_map(self, generation: int) -> bool:
        if not self.is_current(generation):
            return False
        self.map_target = MapTarget(self.query, SEARCH_ZOOM)
        return True

    def on_branch_settled(self, generation: int, category: str, outcome) -> bool:
        """Record one category's outcome: a list of places, or the exception it failed with."""
        if not self.is_current(generation):
            return False
        if isinstance(outcome, list) and outcome:
            self._settled[category] = outcome
        return True

    def settle(self, generation: int) -> bool:
        if not self.is_current(generation):
            return False
        # Rebuilt wholesale, in category order regardless of settle order
        self.places = {c: self._settled[c] for c in self.query_categories if c in self._settled}
        self.error = None if self.places else NO_PLACES_ERROR
        return True

    def fail(self, generation: int, message: str = FETCH_FAILED_ERROR) -> bool:
        if not self.is_current(generation):
            return False
        self.error = message
        return True

    def reveal(self, generation: int) -> bool:
        if not self.is_current(generation) or self.view != ViewState.LOADING:
            return False
        self.view = ViewState.RESULTS
        return True

    def reset(self):
        """Back to the search view; anything still pending for the old search is invalidated."""
        self.generation += 1
        self.view = ViewState.SEARCH
        self.error = None
        self.map_target = WORLD_MAP

    def select_category(self, category: str):
        if category not in self.categories:
            raise ValueError(f"Unknown category: {category}")
        self.selected_category = category


class SearchOrchestrator:
    def __init__(
        self,
        gateway: ApiGateway,
        categories: Iterable[str] = CATEGORIES,
        map_swap_delay: float | None = None,
        reveal_delay: float | None = None,
    ):
        self.gateway = gateway
        self.machine = SearchStateMachine(categories)
        self.map_swap_delay = settings.MAP_SWAP_DELAY if map_swap_delay is None else map_swap_delay
        self.reveal_delay = settings.RESULTS_REVEAL_DELAY if reveal_delay is None else reveal_delay
        self._timers: set[asyncio.Task] = set()
        self._listeners: list[Callable[["SearchOrchestrator"], None]] = []
        self._closed = False

    # --- Read-only view of the state machine ---
    @property
    def view(self) -> ViewState:
        return self.machine.view

    @property
    def query(self) -> str:
        return self.machine.query

    @property
    def places(self) -> GroupedPlaces:
        return self.machine.places

    @property
    def error(self) -> str | None:
        return self.machine.error

    @property
    def selected_category(self) -> str:
        return self.machine.selected_category

    @property
    def categories(self) -> list[str]:
        return self.machine.categories

    @property
    def map_target(self) -> MapTarget:
        return self.machine.map_target

    @property
    def generation(self) -> int:
        return self.machine.generation

    @property
    def is_zooming(self) -> bool:
        return self.machine.view == ViewState.LOADING

    @property
    def has_pending_timers(self) -> bool:
        return bool(self._timers)

    def subscribe(self, listener: Callable[["SearchOrchestrator"], None]):
        """Call `listener(self)` after every state change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[["SearchOrchestrator"], None]):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                # Listener errors are logged, never propagated into the search
                logs.logger.exception(f"Listener {listener!r} failed")

    # --- Operations ---
    async def search(self, query: str):
        if self._closed:
            raise RuntimeError("SearchOrchestrator is closed")

        query = (query or "").strip()
        if not query:
            self.machine.reject_query()
            self._notify()
            return

        generation = self.machine.start(query)
        logs.log(logging.INFO, f"🔍 Search #{generation} started for '{query}'")

        try:
            self._notify()
            self._schedule(self.map_swap_delay, self.machine.swap_map, generation)

            categories = self.machine.query_categories
            outcomes = await self._fan_out(query, categories)

            for category, outcome in zip(categories, outcomes):
                if isinstance(outcome, BaseException):
                    logs.log(logging.WARNING, f"Dropping {category} for '{query}': {outcome}")
                self.machine.on_branch_settled(generation, category, outcome)

            if self.machine.settle(generation):
                logs.log(
                    logging.INFO,
                    f"Search #{generation} settled",
                    extra={c: len(p) for c, p in self.machine.places.items()}
                )
                self._notify()
            else:
                logs.log(logging.INFO, f"Search #{generation} superseded, results discarded")
        except Exception:
            logs.logger.exception(f"Search #{generation} failed unexpectedly")
            if self.machine.fail(generation):
                self._notify()
        finally:
            self._schedule(self.reveal_delay, self.machine.reveal, generation)

    async def _fan_out(self, location: str, categories: list[str]) -> list:
        """One query per category, joined all-settled: each entry is a list of places or an exception."""
        return await asyncio.gather(
            *(self.gateway.find_nearby_places(location, category) for category in categories),
            return_exceptions=True,
        )

    def go_back_to_search(self):
        self.machine.reset()
        self._notify()

    def select_category(self, category: str):
        self.machine.select_category(category)
        self._notify()

    def displayed_places(self) -> list[tuple[str, list[Place]]]:
        return filter_places(self.machine.places, self.machine.selected_category)

    # --- Timers ---
    def _schedule(self, delay: float, transition: Callable[[int], bool], generation: int):
        if self._closed:
            return
        task = asyncio.create_task(self._run_later(delay, transition, generation))
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)

    async def _run_later(self, delay: float, transition: Callable[[int], bool], generation: int):
        await asyncio.sleep(delay)
        if not self._closed and transition(generation):
            self._notify()

    async def wait_idle(self):
        """Wait until every scheduled transition has fired or been cancelled."""
        while self._timers:
            await asyncio.gather(*list(self._timers), return_exceptions=True)

    def close(self):
        """Cancel pending transitions; nothing fires after this."""
        self._closed = True
        for task in list(self._timers):
            task.cancel()
