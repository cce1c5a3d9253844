"""
Farm Map - farm boundary framed by the viewport synchronizer.
"""

import time

import pydeck as pdk
import streamlit as st

from core.theme import get_page_config, inject_theme

st.set_page_config(**get_page_config("Farm Map"))
inject_theme()

from core.session import session_from_state
from core.store import DatasetKind

session = session_from_state(st.session_state)
view = session.view()
farm_panel = view.panel(DatasetKind.FARM)

st.title("🗺️ Farm Map")

if not farm_panel.ready:
    if view.is_loading:
        st.caption("Loading farm boundary...")
        time.sleep(0.25)
        st.rerun()
    st.write("No farm registered yet.")
    if st.button("Register Your Farm"):
        st.switch_page("pages/3_Register_Farm.py")
    st.stop()

farm = farm_panel.data["farm"]
bounds = session.viewport.current_bounds

if bounds is None:
    st.warning("This farm has no boundary to display.")
    st.stop()

layer = pdk.Layer(
    "PolygonLayer",
    data=[{"name": farm.name, "polygon": [list(point) for point in farm.coordinates]}],
    get_polygon="polygon",
    get_fill_color=[74, 222, 128, 180],
    get_line_color=[255, 255, 255],
    line_width_min_pixels=2,
    pickable=True,
)

view_state = pdk.ViewState(
    latitude=bounds.center_latitude,
    longitude=bounds.center_longitude,
    zoom=bounds.zoom_level(),
)

st.pydeck_chart(pdk.Deck(
    layers=[layer],
    initial_view_state=view_state,
    map_style=None,
    tooltip={"text": f"{farm.name}\n{farm.size} acres\n{farm.location}"},
))

col1, col2, col3 = st.columns(3)
col1.metric("Area (map)", f"{bounds.area_sq_km:.3f} sq km")
col2.metric("Centre", f"{bounds.center_latitude:.4f}, {bounds.center_longitude:.4f}")
col3.metric("Registered size", f"{farm.size} acres")
