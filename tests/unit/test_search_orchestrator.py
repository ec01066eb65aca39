"""
Unit tests for the search orchestrator: view transitions, category fan-out and timers
"""
import asyncio
import pytest

from places_ui.constants import (
    FETCH_FAILED_ERROR,
    NO_PLACES_ERROR,
    SEARCH_VALIDATION_ERROR,
    SEARCH_ZOOM,
)
from places_ui.gateway import GatewayError
from places_ui.orchestrator import MapTarget, SearchOrchestrator, ViewState, WORLD_MAP


def make_orchestrator(gateway, categories=None, map_swap_delay=0, reveal_delay=0):
    kwargs = {"map_swap_delay": map_swap_delay, "reveal_delay": reveal_delay}
    if categories is not None:
        kwargs["categories"] = categories
    return SearchOrchestrator(gateway, **kwargs)


@pytest.mark.asyncio
async def test_partial_failure_keeps_successful_categories(fake_gateway, place_factory):
    """Restaurants resolves with 5 places, Cafes rejects: only Restaurants is kept"""
    async def find(location, category):
        if category == "Restaurants":
            return [place_factory(name=f"Restaurant {i}") for i in range(5)]
        raise GatewayError("Failed to fetch data from Gemini API.", status_code=500)

    fake_gateway.find_nearby_places.side_effect = find
    orchestrator = make_orchestrator(fake_gateway, categories=["All", "Restaurants", "Cafes"])

    await orchestrator.search("Paris")
    await orchestrator.wait_idle()

    assert list(orchestrator.places) == ["Restaurants"]
    assert len(orchestrator.places["Restaurants"]) == 5
    assert orchestrator.error is None
    assert orchestrator.view == ViewState.RESULTS


@pytest.mark.asyncio
async def test_search_passes_through_loading(fake_gateway, place_factory):
    fake_gateway.find_nearby_places.return_value = [place_factory()]
    orchestrator = make_orchestrator(fake_gateway)
    views = []
    orchestrator.subscribe(lambda orch: views.append(orch.view))

    assert orchestrator.view == ViewState.SEARCH
    await orchestrator.search("Lisbon")
    assert orchestrator.view == ViewState.LOADING
    await orchestrator.wait_idle()

    assert views[0] == ViewState.LOADING
    assert views[-1] == ViewState.RESULTS
    assert views.index(ViewState.RESULTS) > views.index(ViewState.LOADING)


@pytest.mark.asyncio
async def test_fan_out_skips_all_sentinel(fake_gateway):
    orchestrator = make_orchestrator(fake_gateway)

    await orchestrator.search("Tokyo")
    await orchestrator.wait_idle()

    queried = [call.args[1] for call in fake_gateway.find_nearby_places.call_args_list]
    assert queried == ["Restaurants", "Cafes", "Parks", "Museums", "Shops"]
    assert all(call.args[0] == "Tokyo" for call in fake_gateway.find_nearby_places.call_args_list)


@pytest.mark.asyncio
async def test_empty_query_is_rejected_without_network(fake_gateway):
    orchestrator = make_orchestrator(fake_gateway)

    await orchestrator.search("")
    await orchestrator.search("   ")

    assert orchestrator.view == ViewState.SEARCH
    assert orchestrator.error == SEARCH_VALIDATION_ERROR
    fake_gateway.find_nearby_places.assert_not_called()
    assert not orchestrator.has_pending_timers


@pytest.mark.asyncio
async def test_all_categories_failing_sets_no_places_error(fake_gateway):
    fake_gateway.find_nearby_places.side_effect = GatewayError("boom", status_code=500)
    orchestrator = make_orchestrator(fake_gateway)

    await orchestrator.search("Atlantis")
    await orchestrator.wait_idle()

    assert orchestrator.places == {}
    assert orchestrator.error == NO_PLACES_ERROR
    assert orchestrator.view == ViewState.RESULTS


@pytest.mark.asyncio
async def test_empty_category_result_is_omitted(fake_gateway, place_factory):
    async def find(location, category):
        return [] if category == "Cafes" else [place_factory(name=f"{category} spot")]

    fake_gateway.find_nearby_places.side_effect = find
    orchestrator = make_orchestrator(fake_gateway)

    await orchestrator.search("Berlin")
    await orchestrator.wait_idle()

    assert "Cafes" not in orchestrator.places
    assert list(orchestrator.places) == ["Restaurants", "Parks", "Museums", "Shops"]


@pytest.mark.asyncio
async def test_new_search_clears_previous_state(fake_gateway, place_factory):
    fake_gateway.find_nearby_places.side_effect = GatewayError("boom")
    orchestrator = make_orchestrator(fake_gateway)
    await orchestrator.search("Nowhere")
    await orchestrator.wait_idle()
    assert orchestrator.error == NO_PLACES_ERROR

    fake_gateway.find_nearby_places.side_effect = None
    fake_gateway.find_nearby_places.return_value = [place_factory()]
    orchestrator.select_category("Parks")
    await orchestrator.search("Madrid")

    assert orchestrator.error is None
    assert orchestrator.selected_category == "All"
    await orchestrator.wait_idle()
    assert len(orchestrator.places) == 5


@pytest.mark.asyncio
async def test_map_swap_is_deferred(fake_gateway):
    orchestrator = make_orchestrator(fake_gateway, map_swap_delay=10, reveal_delay=10)

    await orchestrator.search("Rome")

    # The zoom starts on the old map; the target only moves when the timer fires
    assert orchestrator.map_target == WORLD_MAP
    assert orchestrator.is_zooming
    orchestrator.close()
    await orchestrator.wait_idle()


@pytest.mark.asyncio
async def test_map_swaps_to_searched_location(fake_gateway):
    orchestrator = make_orchestrator(fake_gateway)

    await orchestrator.search("Rome")
    await orchestrator.wait_idle()

    assert orchestrator.map_target == MapTarget("Rome", SEARCH_ZOOM)
    assert not orchestrator.is_zooming


@pytest.mark.asyncio
async def test_unexpected_failure_still_reveals_results(fake_gateway):
    orchestrator = make_orchestrator(fake_gateway)

    async def explode(location, categories):
        raise RuntimeError("aggregation bug")

    orchestrator._fan_out = explode
    await orchestrator.search("Oslo")
    await orchestrator.wait_idle()

    assert orchestrator.error == FETCH_FAILED_ERROR
    assert orchestrator.view == ViewState.RESULTS


@pytest.mark.asyncio
async def test_failing_listener_on_start_still_reveals_results(fake_gateway, place_factory):
    fake_gateway.find_nearby_places.return_value = [place_factory()]
    orchestrator = make_orchestrator(fake_gateway, categories=["All", "Parks"])
    calls = []

    def listener(orch):
        calls.append(orch.view)
        if len(calls) == 1:
            raise RuntimeError("render failed")

    orchestrator.subscribe(listener)
    await orchestrator.search("Rome")
    await orchestrator.wait_idle()

    assert fake_gateway.find_nearby_places.await_count == 1
    assert list(orchestrator.places) == ["Parks"]
    assert orchestrator.view == ViewState.RESULTS
    assert orchestrator.map_target == MapTarget("Rome", SEARCH_ZOOM)


@pytest.mark.asyncio
async def test_failing_listener_on_settle_keeps_results(fake_gateway, place_factory):
    fake_gateway.find_nearby_places.return_value = [place_factory()]
    orchestrator = make_orchestrator(fake_gateway)

    def listener(orch):
        if orch.places:
            raise RuntimeError("render failed")

    orchestrator.subscribe(listener)
    await orchestrator.search("Rome")
    await orchestrator.wait_idle()

    assert orchestrator.error is None
    assert len(orchestrator.places) == 5
    assert orchestrator.view == ViewState.RESULTS


@pytest.mark.asyncio
async def test_stale_search_results_are_discarded(fake_gateway, place_factory):
    release = asyncio.Event()

    async def find(location, category):
        if location == "Rome":
            await release.wait()
            return [place_factory(name="Old result")]
        return [place_factory(name="New result")]

    fake_gateway.find_nearby_places.side_effect = find
    orchestrator = make_orchestrator(fake_gateway)

    first = asyncio.create_task(orchestrator.search("Rome"))
    await asyncio.sleep(0)
    await orchestrator.search("Oslo")
    release.set()
    await first
    await orchestrator.wait_idle()

    assert orchestrator.query == "Oslo"
    names = {place.name for places in orchestrator.places.values() for place in places}
    assert names == {"New result"}
    assert orchestrator.map_target == MapTarget("Oslo", SEARCH_ZOOM)


@pytest.mark.asyncio
async def test_go_back_during_loading_cancels_reveal(fake_gateway, place_factory):
    release = asyncio.Event()

    async def find(location, category):
        await release.wait()
        return [place_factory()]

    fake_gateway.find_nearby_places.side_effect = find
    orchestrator = make_orchestrator(fake_gateway)

    search = asyncio.create_task(orchestrator.search("Vienna"))
    await asyncio.sleep(0)
    orchestrator.go_back_to_search()
    release.set()
    await search
    await orchestrator.wait_idle()

    assert orchestrator.view == ViewState.SEARCH
    assert orchestrator.map_target == WORLD_MAP
    assert orchestrator.places == {}


@pytest.mark.asyncio
async def test_go_back_resets_map_and_error(fake_gateway):
    fake_gateway.find_nearby_places.side_effect = GatewayError("boom")
    orchestrator = make_orchestrator(fake_gateway)
    await orchestrator.search("Cairo")
    await orchestrator.wait_idle()

    orchestrator.go_back_to_search()

    assert orchestrator.view == ViewState.SEARCH
    assert orchestrator.error is None
    assert orchestrator.map_target == WORLD_MAP


@pytest.mark.asyncio
async def test_close_cancels_pending_transitions(fake_gateway, place_factory):
    fake_gateway.find_nearby_places.return_value = [place_factory()]
    orchestrator = make_orchestrator(fake_gateway, map_swap_delay=10, reveal_delay=10)

    await orchestrator.search("Prague")
    assert orchestrator.has_pending_timers
    orchestrator.close()
    await orchestrator.wait_idle()

    assert orchestrator.view == ViewState.LOADING
    assert orchestrator.map_target == WORLD_MAP
    with pytest.raises(RuntimeError):
        await orchestrator.search("Prague")


@pytest.mark.asyncio
async def test_filter_all_restores_full_grouping(fake_gateway, place_factory):
    async def find(location, category):
        return [place_factory(name=f"{category} 1"), place_factory(name=f"{category} 2")]

    fake_gateway.find_nearby_places.side_effect = find
    orchestrator = make_orchestrator(fake_gateway)
    await orchestrator.search("Seoul")
    await orchestrator.wait_idle()
    everything = orchestrator.displayed_places()

    orchestrator.select_category("Museums")
    assert [category for category, _ in orchestrator.displayed_places()] == ["Museums"]

    orchestrator.select_category("All")
    assert orchestrator.displayed_places() == everything
    assert len(everything) == 5


def test_selecting_unknown_category_raises(fake_gateway):
    orchestrator = make_orchestrator(fake_gateway)

    with pytest.raises(ValueError):
        orchestrator.select_category("Nightclubs")
    assert orchestrator.selected_category == "All"
