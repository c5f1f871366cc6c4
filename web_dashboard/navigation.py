#!/usr/bin/env python3
"""
Shared Navigation Component
===========================

Sidebar links to every feedlot screen, grouped the same way as the main menu.
"""

import streamlit as st

# (section, [(page script, label, icon)])
MENU_SECTIONS = [
    ("Home/Lots", [
        ("pages/new_group.py", "New Group", "➕"),
        ("pages/key_details.py", "Edit Key Group Details", "✏️"),
        ("pages/all_details.py", "Edit All Group Details", "📋"),
        ("pages/performance.py", "Performance Charts", "📊"),
    ]),
    ("Brockoff", [
        ("pages/brockoff.py", "Add-Edit Group", "🐂"),
    ]),
    ("Other", [
        ("pages/pens.py", "Edit Pens", "🏠"),
        ("pages/pen_key_details.py", "Edit Key Pen Details", "🔑"),
        ("pages/new_pen.py", "New Pen", "➕"),
        ("pages/cattle_by_pen.py", "Edit Cattle by Pen", "🐄"),
        ("pages/hedging.py", "Hedging", "📈"),
        ("pages/feeder_cattle.py", "Feeder Cattle Hedging", "🌾"),
        ("pages/logs.py", "System Logs", "📜"),
    ]),
]


def render_navigation() -> None:
    """Render the navigation sidebar."""
    st.sidebar.title("Navigation")
    st.sidebar.page_link("streamlit_app.py", label="Main Menu", icon="🏠")

    for section, links in MENU_SECTIONS:
        st.sidebar.markdown(f"**{section}**")
        for page, label, icon in links:
            st.sidebar.page_link(page, label=label, icon=icon)
