"""Main Application Entry Point.

Run with ``streamlit run app.py``. The sidebar manages saved simulations;
the main page edits the active one and shows the computed income.
"""

import os
import sys

import streamlit as st

# Add project root to path if not present (for running from root)
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sasu_sim.core.logging import configure_logging
from sasu_sim.core.settings import get_settings
from sasu_sim.ui.components.sidebar import render_sidebar
from sasu_sim.ui.pages.main import render_main_page
from sasu_sim.ui.state import get_store


def main() -> None:
    """Main application entry point."""
    st.set_page_config(
        page_title="Simulateur SASU",
        page_icon="🧮",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    settings = get_settings()
    log = configure_logging(settings.log_level)

    store = get_store()
    render_sidebar(store)
    render_main_page(store)
    log.debug("page_rendered", active_id=store.active_id)

    if settings.debug_mode:
        with st.expander("🐞 Debug", expanded=False):
            st.json(store.active.model_dump(mode="json", by_alias=True))


if __name__ == "__main__":
    main()
