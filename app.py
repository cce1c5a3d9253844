"""
AgriIntel - Farm Dashboard

Main Streamlit page: farm overview, weather, market trends, crop health and
NDVI trends, each rendered from its own panel so that a panel still loading
(or unavailable) never blocks the others.
"""

import logging
import time

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from core.theme import get_page_config, inject_theme, section_header, status_color, badge, WEATHER_ICONS, NOTIFICATION_ICONS

st.set_page_config(**get_page_config("Dashboard"))
inject_theme()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s │ %(name)-20s │ %(levelname)-8s │ %(message)s',
    datefmt='%H:%M:%S',
)

from core.session import session_from_state, restart_session
from core.store import DatasetKind, DatasetStatus, Readiness

session = session_from_state(st.session_state)
view = session.view()


def placeholder(panel, what: str):
    """Loading or unavailable message for a panel without data."""
    if panel.status == DatasetStatus.FAILED:
        st.error(f"{what} unavailable: {panel.error}")
    else:
        st.caption(f"Loading {what.lower()}...")


# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR
# ═══════════════════════════════════════════════════════════════════════════
st.sidebar.title("🌾 AgriIntel")
st.sidebar.markdown("---")

notifications_panel = view.panel(DatasetKind.NOTIFICATIONS)
st.sidebar.subheader(f"🔔 Notifications ({view.unread_count} unread)")
if notifications_panel.ready:
    for note in notifications_panel.data:
        icon = NOTIFICATION_ICONS[note.type.value]
        label = f"{icon} {note.message}" if note.read else f"{icon} **{note.message}**"
        st.sidebar.markdown(label)
        col1, col2 = st.sidebar.columns([3, 1])
        col1.caption(note.time)
        if not note.read and col2.button("✓", key=f"ack_{note.id}"):
            session.notifications.acknowledge(note.id)
            st.rerun()
    if view.unread_count and st.sidebar.button("Mark all as read"):
        session.notifications.acknowledge_all()
        st.rerun()
else:
    placeholder(notifications_panel, "Notifications")

st.sidebar.markdown("---")
if st.sidebar.button("🔄 Reload data"):
    restart_session(st.session_state)
    st.rerun()

# ═══════════════════════════════════════════════════════════════════════════
# HEADER
# ═══════════════════════════════════════════════════════════════════════════
st.title("Farm Dashboard")
if view.readiness == Readiness.LOADING:
    st.info("⏳ Loading farm data...")
elif view.readiness == Readiness.READY_WITH_ERRORS:
    st.warning("Some data sources are unavailable. Affected panels are marked below.")

# ═══════════════════════════════════════════════════════════════════════════
# FARM OVERVIEW
# ═══════════════════════════════════════════════════════════════════════════
st.header("🏡 Farm Overview")
farm_panel = view.panel(DatasetKind.FARM)
if farm_panel.ready:
    farm = farm_panel.data["farm"]
    summary = farm_panel.data["summary"]
    col1, col2 = st.columns(2)
    with col1:
        st.write(f"**Name:** {farm.name}")
        st.write(f"**Size:** {farm.size} acres")
        st.write(f"**Location:** {farm.location}")
        st.write(f"**Soil Type:** {farm.soil_type}")
        st.write(f"**Irrigation:** {farm.irrigation}")
        st.caption(f"{summary.crop_count} crops on {summary.planted_area:g} acres")
    with col2:
        for crop in farm.crops:
            color = farm_panel.data["crop_colors"][crop.id]
            st.markdown(
                f"**{crop.name}**: {crop.area} acres, planted {crop.planted} "
                f"{badge(crop.status.value, color)}",
                unsafe_allow_html=True,
            )
elif farm_panel.status == DatasetStatus.ABSENT and not view.is_loading:
    st.write("No farm registered yet.")
    if st.button("Register Your Farm"):
        st.switch_page("pages/3_Register_Farm.py")
else:
    placeholder(farm_panel, "Farm")

# ═══════════════════════════════════════════════════════════════════════════
# WEATHER & MARKET
# ═══════════════════════════════════════════════════════════════════════════
col_weather, col_market = st.columns(2)

with col_weather:
    st.header("☀️ Weather Forecast")
    weather_panel = view.panel(DatasetKind.WEATHER)
    if weather_panel.ready:
        current = weather_panel.data["weather"].current
        st.metric(current.condition, f"{current.temperature}°C")
        m1, m2, m3 = st.columns(3)
        m1.metric("Humidity", f"{current.humidity}%")
        m2.metric("Wind", f"{current.wind} km/h")
        m3.metric("Rainfall", f"{current.rainfall} mm")
        day_cols = st.columns(max(len(weather_panel.data["forecast"]), 1))
        for col, (day, icon, rain) in zip(day_cols, weather_panel.data["forecast"]):
            col.markdown(f"**{day.day}**  \n{WEATHER_ICONS[icon]}  \n{day.temperature}°C  \n{rain}")
    else:
        placeholder(weather_panel, "Weather data")

with col_market:
    st.header("📈 Market Trends")
    market_panel = view.panel(DatasetKind.MARKET)
    if market_panel.ready:
        quotes = market_panel.data
        fig = go.Figure(go.Bar(
            x=[q.crop for q in quotes],
            y=[q.price for q in quotes],
            marker_color=[status_color(q.color) for q in quotes],
        ))
        fig.update_layout(height=260, margin=dict(l=0, r=0, t=10, b=0), yaxis_title="Price (Ksh)")
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(pd.DataFrame([
            {"Crop": q.crop, "Price (Ksh)": q.price, "Change": q.change_label} for q in quotes
        ]), hide_index=True, use_container_width=True)
    else:
        placeholder(market_panel, "Market data")

# ═══════════════════════════════════════════════════════════════════════════
# CROP HEALTH & NDVI
# ═══════════════════════════════════════════════════════════════════════════
col_health, col_ndvi = st.columns(2)

with col_health:
    st.header("🌱 Crop Health")
    health_panel = view.panel(DatasetKind.CROP_HEALTH)
    if health_panel.ready:
        points = health_panel.data
        fig = px.pie(
            names=[p.label for p in points],
            values=[p.value for p in points],
            color_discrete_sequence=[status_color(p.color) for p in points],
        )
        fig.update_layout(height=260, margin=dict(l=0, r=0, t=10, b=0))
        st.plotly_chart(fig, use_container_width=True)
        for point in points:
            st.markdown(f"**{point.label}** {badge(f'{point.value:g}% Health', point.color)}",
                        unsafe_allow_html=True)
            if point.issues:
                st.caption(f"Issues: {', '.join(point.issues)}")
            st.caption(f"Treatment: {point.treatment}")
    else:
        placeholder(health_panel, "Crop health data")

with col_ndvi:
    st.header("🛰️ NDVI Trends")
    ndvi_panel = view.panel(DatasetKind.NDVI)
    if ndvi_panel.ready and ndvi_panel.data["latest"] is not None:
        frame = pd.DataFrame(ndvi_panel.data["series"], columns=["date", "ndvi"])
        fig = px.line(frame, x="date", y="ndvi", markers=True)
        fig.update_layout(height=260, margin=dict(l=0, r=0, t=10, b=0), yaxis_range=[0, 1])
        st.plotly_chart(fig, use_container_width=True)
        latest = ndvi_panel.data["latest"]
        st.markdown(f"**Latest NDVI:** {latest.value:g} {badge(latest.vigor.value, latest.color)}",
                    unsafe_allow_html=True)
        st.write(latest.message)
    elif ndvi_panel.ready:
        st.caption("No NDVI readings yet.")
    else:
        placeholder(ndvi_panel, "NDVI data")

# ═══════════════════════════════════════════════════════════════════════════
# SOIL
# ═══════════════════════════════════════════════════════════════════════════
section_header("🧪 Soil Composition", "Latest readings against their optimal ranges")
soil_panel = view.panel(DatasetKind.SOIL)
if soil_panel.ready:
    soil = soil_panel.data
    fig = go.Figure(go.Bar(
        x=[s.name for s in soil],
        y=[s.value for s in soil],
        marker_color=[status_color(s.color) for s in soil],
    ))
    fig.update_layout(height=260, margin=dict(l=0, r=0, t=10, b=0))
    st.plotly_chart(fig, use_container_width=True)
    st.dataframe(pd.DataFrame([
        {"Parameter": s.name, "Value": s.value, "Optimal": s.optimal_range, "Status": s.status.value}
        for s in soil
    ]), hide_index=True, use_container_width=True)
else:
    placeholder(soil_panel, "Soil data")

# ═══════════════════════════════════════════════════════════════════════════
# AUTO REFRESH
# ═══════════════════════════════════════════════════════════════════════════
if view.is_loading:
    time.sleep(0.25)
    st.rerun()
