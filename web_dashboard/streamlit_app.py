#!/usr/bin/env python3
"""
Feedlot Records - main menu
Links to every record screen, grouped by area.
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.constants import VERSION
from log_handler import log_message
from navigation import MENU_SECTIONS, render_navigation
from streamlit_utils import get_supabase_client, init_logging

st.set_page_config(page_title="Feedlot Records", page_icon="🐄", layout="wide")

init_logging()
render_navigation()

st.title("🐄 Feedlot Records")
st.caption(f"Version {VERSION}")

client = get_supabase_client()
if client is None:
    st.error("❌ Supabase is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY in your .env file.")
    st.stop()

if "connection_checked" not in st.session_state:
    st.session_state.connection_checked = client.test_connection()
    log_message(f"Main menu opened, connection ok: {st.session_state.connection_checked}")

if not st.session_state.connection_checked:
    st.warning("⚠️ Could not reach Supabase. Pages may show load errors.")

columns = st.columns(len(MENU_SECTIONS))
for col, (section, links) in zip(columns, MENU_SECTIONS):
    with col:
        st.subheader(section)
        for page, label, icon in links:
            st.page_link(page, label=label, icon=icon)
