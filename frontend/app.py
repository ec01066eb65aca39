import asyncio
import html
import streamlit as st
import streamlit.components.v1 as components
import requests

from places_ui.config import settings
from places_ui.gateway import ApiGateway
from places_ui.map_display import MapDisplay, place_map_html
from places_ui.orchestrator import SearchOrchestrator, ViewState
from places_ui.presentation import CardDeck, PlaceCard, star_states

# Page configuration
st.set_page_config(
    page_title="Nearby Places",
    page_icon="📍",
    layout="wide",
    initial_sidebar_state="collapsed"
)

MAP_HEIGHT = 560

# Custom CSS for better UI
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        color: #111827;
        text-align: center;
        padding: 1rem 0;
        font-weight: bold;
    }
    .loading-box {
        text-align: center;
        padding: 1.5rem;
        border-radius: 0.75rem;
        background-color: rgba(17, 24, 39, 0.75);
        color: white;
    }
    .loading-box p {
        color: rgba(255, 255, 255, 0.8);
        font-size: 1.1rem;
    }
    .place-tag {
        display: inline-block;
        padding: 0.15rem 0.75rem;
        border-radius: 9999px;
        background-color: #e5e7eb;
        color: #1f2937;
        font-size: 0.75rem;
        font-weight: 600;
    }
    .stars {
        color: #eab308;
        font-size: 1.1rem;
    }
    .stButton>button {
        border-radius: 9999px;
        font-weight: 600;
    }
</style>
""", unsafe_allow_html=True)

# Initialize session state
if "orchestrator" not in st.session_state:
    gateway = ApiGateway()
    st.session_state.gateway = gateway
    st.session_state.orchestrator = SearchOrchestrator(gateway)
    st.session_state.map_display = MapDisplay()
    st.session_state.cards = CardDeck(gateway)

orchestrator: SearchOrchestrator = st.session_state.orchestrator

def check_backend_health() -> bool:
    """Check if backend is running."""
    try:
        response = requests.get(f"{settings.BACKEND_URL}/health", timeout=2)
        return response.status_code == 200
    except requests.exceptions.RequestException:
        return False

def render_map(orch: SearchOrchestrator):
    """Background map; zoomed and blurred while a search is loading."""
    map_display: MapDisplay = st.session_state.map_display
    target = orch.map_target
    map_display.update(target.location, target.zoom, is_zooming=orch.is_zooming)
    # Each redraw mounts a fresh iframe in its final state, so the CSS transition does not animate here
    components.html(map_display.to_html(height=MAP_HEIGHT), height=MAP_HEIGHT + 10)

def render_loading(location: str):
    st.markdown(f"""
    <div class="loading-box">
        <h3>⏳ Finding places near...</h3>
        <p>{html.escape(location)}</p>
    </div>
    """, unsafe_allow_html=True)

def render_progress(placeholder, orch: SearchOrchestrator):
    """Redraw the map area on every state change during a search."""
    with placeholder.container():
        if orch.view == ViewState.LOADING:
            render_loading(orch.query)
        render_map(orch)

def run_search(query: str, placeholder):
    """Run one search to completion, animating inside `placeholder`, then rerun into the results view."""
    listener = lambda orch: render_progress(placeholder, orch)

    async def _search():
        orchestrator.subscribe(listener)
        try:
            await orchestrator.search(query)
            await orchestrator.wait_idle()
        finally:
            orchestrator.unsubscribe(listener)

    asyncio.run(_search())
    st.rerun()

def search_form(key: str):
    """Search box; Enter submits the form."""
    with st.form(key=key, clear_on_submit=False):
        col_input, col_button = st.columns([5, 1])
        with col_input:
            query = st.text_input(
                "Search for places",
                value=orchestrator.query,
                placeholder="Enter city, address, or landmark",
                label_visibility="collapsed"
            )
        with col_button:
            submitted = st.form_submit_button("🔍 Search", use_container_width=True)
    return query if submitted else None

def render_category_filter():
    columns = st.columns(len(orchestrator.categories))
    for column, category in zip(columns, orchestrator.categories):
        with column:
            selected = category == orchestrator.selected_category
            if st.button(category, key=f"category_{category}", type="primary" if selected else "secondary", use_container_width=True):
                orchestrator.select_category(category)
                st.rerun()

def render_place_card(card: PlaceCard, key: str):
    place = card.place
    with st.container(border=True):
        col_image, col_body = st.columns([1, 3])
        with col_image:
            st.image(card.image_url, use_container_width=True)
        with col_body:
            st.markdown(f"### {place.name}")
            stars = "".join("★" if filled else "☆" for filled in star_states(place.rating))
            st.markdown(f'<span class="stars">{stars}</span> **{place.rating:.1f}**', unsafe_allow_html=True)
            st.write(place.description)
            st.caption(place.address)

            if card.details:
                st.divider()
                st.write(card.details)
                components.html(place_map_html(place), height=200)
            if card.error:
                st.error(card.error)

            col_tag, col_toggle = st.columns([3, 1])
            with col_tag:
                st.markdown(f'<span class="place-tag">{html.escape(place.category_tag)}</span>', unsafe_allow_html=True)
            with col_toggle:
                if st.button(card.button_label, key=key, disabled=card.loading, use_container_width=True):
                    asyncio.run(card.toggle())
                    st.rerun()

def render_results():
    cards: CardDeck = st.session_state.cards
    cards.sync(orchestrator.generation)

    col_back, col_title = st.columns([1, 12])
    with col_back:
        if st.button("←", key="back_to_search", help="Back to search"):
            orchestrator.go_back_to_search()
            st.rerun()
    with col_title:
        st.markdown(f'## Results for "{orchestrator.query}"')

    query = search_form("results_search")
    if query is not None:
        run_search(query, st.empty())

    render_category_filter()

    if orchestrator.error:
        st.error(f"**Error:** {orchestrator.error}")
        return

    displayed = orchestrator.displayed_places()
    if not displayed:
        st.markdown("#### No Results Found")
        st.caption("There were no places found for the selected category.")
        return

    for category, places in displayed:
        st.header(category)
        for index, place in enumerate(places):
            render_place_card(cards.card(category, place, index), key=f"details_{category}_{index}")

# Sidebar
with st.sidebar:
    st.header("⚙️ Settings")
    if check_backend_health():
        st.success("✅ Backend Connected")
    else:
        st.warning("⚠️ Backend Disconnected")
        st.code("cd backend && python run.py", language="bash")
    st.caption(f"Backend: {settings.BACKEND_URL}")

# Main views
if orchestrator.view == ViewState.RESULTS:
    render_results()
else:
    st.markdown('<div class="main-header">📍 Nearby Places</div>', unsafe_allow_html=True)
    query = search_form("search")
    if orchestrator.error:
        st.error(orchestrator.error)
    progress = st.empty()
    if query is not None:
        run_search(query, progress)
    else:
        render_progress(progress, orchestrator)
