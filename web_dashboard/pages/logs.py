#!/usr/bin/env python3
"""
System Logs page
Recent application log lines, either from logs/app.log or from the
in-memory buffer of this server process
"""

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from log_handler import get_log_file, get_log_handler, read_logs_from_file
from navigation import render_navigation
from streamlit_utils import init_logging

LOG_FILE_SOURCE = "Log file"
SESSION_SOURCE = "Since server start"

st.set_page_config(layout="wide", page_title="System Logs", page_icon="📜")
init_logging()
render_navigation()

st.title("📜 System Logs")

source = st.radio("Source", [LOG_FILE_SOURCE, SESSION_SOURCE], horizontal=True)
if source == LOG_FILE_SOURCE:
    st.caption(f"Reading {get_log_file()}")
else:
    st.caption("Most recent records kept in memory by this server process")

col1, col2, col3, col4, col5 = st.columns([1, 1, 1, 2, 1])
with col1:
    level = st.selectbox("Level", ["All", "DEBUG", "INFO", "WARNING", "ERROR"], index=0)
with col2:
    tail_lines = st.number_input("Lines", min_value=50, max_value=5000, value=200, step=50)
with col3:
    module = st.text_input("Module")
with col4:
    search = st.text_input("Search messages")
with col5:
    st.write("")
    if st.button("🔄 Refresh Logs"):
        st.rerun()
    if source == SESSION_SOURCE and st.button("🗑️ Clear"):
        get_log_handler().clear()
        st.rerun()

filters = dict(
    n=int(tail_lines),
    level=None if level == "All" else level,
    module=module or None,
    search=search or None,
)
if source == LOG_FILE_SOURCE:
    logs = read_logs_from_file(**filters)
else:
    logs = get_log_handler().get_logs(**filters)

if not logs:
    st.info("No log entries found")
else:
    # Newest first
    frame = pd.DataFrame(reversed(logs), columns=['timestamp', 'level', 'module', 'message'])
    st.dataframe(frame, use_container_width=True, hide_index=True)
