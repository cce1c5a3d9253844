"""
Farm Registration

Collects a complete farm description and hands it to the session in one go.
"""

import json

import streamlit as st
from core.theme import get_page_config, inject_theme

st.set_page_config(**get_page_config("Register Farm"))
inject_theme()

from core.errors import RegistrationError
from core.session import session_from_state

session = session_from_state(st.session_state)

SOIL_TYPES = ["Loamy", "Clay", "Sandy", "Silty", "Peaty", "Chalky"]
IRRIGATION_METHODS = ["Drip system", "Sprinkler", "Furrow", "Rain-fed"]

st.title("Register Your Farm")
st.caption("Please provide details about your farm to get personalized recommendations.")

with st.form("register_farm"):
    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Farm Name", placeholder="e.g., Green Valley Farm")
        size = st.number_input("Farm Size (acres)", min_value=0.0, value=0.0, step=0.1)
        location = st.text_input("Location", placeholder="e.g., Nakuru County")
    with col2:
        soil_type = st.selectbox("Primary Soil Type", SOIL_TYPES)
        irrigation = st.selectbox("Irrigation", IRRIGATION_METHODS)

    boundary = st.text_area(
        "Farm boundary",
        placeholder="[[36.815, -1.295], [36.82, -1.295], [36.82, -1.29], [36.815, -1.29]]",
        help="JSON list of [longitude, latitude] points",
    )
    crops = st.text_area(
        "Crops",
        placeholder='[{"id": 1, "name": "Maize", "area": 2.5, "planted": "2023-03-15"}]',
        help="JSON list of crops (optional)",
    )
    submitted = st.form_submit_button("Register Farm")

if submitted:
    try:
        farm = session.register_farm({
            "name": name,
            "size": size,
            "location": location,
            "soil_type": soil_type,
            "irrigation": irrigation,
            "coordinates": json.loads(boundary) if boundary.strip() else [],
            "crops": json.loads(crops) if crops.strip() else [],
        })
    except json.JSONDecodeError as e:
        st.error(f"Boundary and crops must be valid JSON: {e}")
    except RegistrationError as e:
        st.error(str(e))
    else:
        st.success(f"Registered {farm.name}.")
        st.page_link("pages/1_Farm_Map.py", label="View on map", icon="🗺️")
