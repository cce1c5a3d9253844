"""
Shared theme and styling for all pages.

Provides consistent CSS, the colour palette behind the analytics colour
keys, and small page helpers.
"""


# Analytics colour keys -> display colours
STATUS_COLORS = {
    'green': '#4ade80',
    'amber': '#fde68a',
    'red': '#f87171',
    'gray': '#9ca3af',
}

WEATHER_ICONS = {
    'sun': '☀️',
    'rain': '🌧️',
    'wind': '💨',
    'cloud': '☁️',
}

NOTIFICATION_ICONS = {
    'alert': '🔔',
    'warning': '⚠️',
    'info': 'ℹ️',
}

SHARED_CSS = """
<style>
    /* Hide Streamlit chrome */
    #MainMenu, header, footer, .stDeployButton {
        visibility: hidden;
        display: none;
    }

    .block-container {
        padding: 1.5rem 2rem;
        max-width: 1200px;
    }

    h1 {
        font-weight: 600;
        color: #14532d;
        letter-spacing: -0.025em;
    }
    h2 {
        font-weight: 500;
        color: #334155;
        margin-top: 1.5rem;
    }

    .stExpander {
        border: 1px solid #dcfce7;
        border-radius: 8px;
    }

    [data-testid="stMetricValue"] {
        font-weight: 600;
    }
</style>
"""


def status_color(key: str) -> str:
    """Display colour for an analytics colour key."""
    return STATUS_COLORS.get(key, STATUS_COLORS['gray'])


def get_page_config(title: str):
    """Get consistent page configuration."""
    return {
        'page_title': f"{title} | AgriIntel",
        'page_icon': "🌾",
        'layout': "wide",
    }


def inject_theme():
    """Inject shared CSS into the page."""
    import streamlit as st
    st.markdown(SHARED_CSS, unsafe_allow_html=True)


def section_header(title: str, description: str = None):
    """Render a consistent section header."""
    import streamlit as st
    st.header(title)
    if description:
        st.caption(description)


def badge(text: str, color_key: str) -> str:
    """Inline HTML pill coloured by an analytics colour key."""
    return (f"<span style='background:{status_color(color_key)};padding:2px 8px;"
            f"border-radius:999px;font-size:0.8rem;font-weight:600'>{text}</span>")
