"""
Farm Assistant

Scripted chat: each question gets one canned agronomy tip after a short pause.
"""

import time

import streamlit as st
from core.theme import get_page_config, inject_theme

st.set_page_config(**get_page_config("Assistant"))
inject_theme()

from core.assistant import SubmitOutcome
from core.models import Sender
from core.session import session_from_state

session = session_from_state(st.session_state)
assistant = session.assistant

st.title("Farm Assistant")
st.caption("Ask about irrigation, planting, soil or market timing.")

for msg in assistant.messages:
    role = "user" if msg.sender == Sender.USER else "assistant"
    with st.chat_message(role):
        st.markdown(msg.text)

if assistant.is_composing:
    with st.chat_message("assistant"):
        st.markdown("_Composing a reply..._")

if prompt := st.chat_input("Ask the farm assistant...", disabled=assistant.is_composing):
    outcome = assistant.submit(prompt)
    if outcome == SubmitOutcome.BUSY:
        st.toast("Please wait for the current reply.")
    st.rerun()

with st.sidebar:
    st.subheader("Actions")
    if st.button("New Conversation"):
        assistant.reset()
        st.rerun()
    if st.button("Back to Dashboard"):
        st.switch_page("app.py")

    st.divider()
    st.subheader("Try These")
    st.markdown("""
    - When should I irrigate the maize field?
    - Is now a good time to sell beans?
    - What does my soil test say?
    """)

if assistant.is_composing:
    time.sleep(0.25)
    st.rerun()
