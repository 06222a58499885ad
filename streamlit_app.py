"""
Correlation Calculator
Main entry point for Streamlit deployment
"""

import streamlit as st

# Set page config FIRST - before any other Streamlit command
st.set_page_config(
    page_title="Correlation Calculator",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="collapsed"
)

from logging_utils import setup_logging
import correlation_page

if __name__ == "__main__":
    setup_logging()
    correlation_page.show()
