"""
CSV Insight
Main entry point for Streamlit deployment
"""

import streamlit as st

# Set page config FIRST - before any other Streamlit command
st.set_page_config(
    page_title="CSV Insight",
    page_icon="📑",
    layout="wide",
    initial_sidebar_state="expanded"
)

from config import get_config
from utils.logging_config import setup_logging

if __name__ == "__main__":
    config = get_config()
    setup_logging(
        log_level="DEBUG" if config.debug_mode else config.logging_level,
        log_to_file=config.log_to_file,
    )

    # Import and run the main application (without calling set_page_config again)
    from homepage import main_content
    main_content()
