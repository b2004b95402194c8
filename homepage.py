"""
CSV Insight
Homepage - Main navigation and introduction
"""

import streamlit as st

import analysis_page
import comparison_page
import data_handling_page
from session_state_keys import (
    PAGE_ANALYSIS,
    PAGE_COMPARISON,
    PAGE_DATA_HANDLING,
    PAGE_HOME,
    SESSION_CURRENT_PAGE,
    init_session_state,
)
from workspace_utils import get_workspace_files


def _go_to(page):
    st.session_state[SESSION_CURRENT_PAGE] = page
    st.rerun()


def show_home():
    """Show the main homepage"""
    st.markdown("""
    <h1 style='text-align: center; font-size: 3.2rem; margin: 1rem 0 0.5rem 0;
               background: linear-gradient(90deg, #3A0CA3, #4361EE, #4CC9F0);
               -webkit-background-clip: text; -webkit-text-fill-color: transparent; font-weight: 700;'>
        CSV Insight
    </h1>
    <p style='text-align: center; font-size: 1.2rem; color: #555;'>
        Statistics, charts and comparisons for your CSV files
    </p>
    """, unsafe_allow_html=True)

    st.markdown("---")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown("### 📊 Data Handling")
        st.markdown("Upload CSV files, review validation issues and remove duplicate rows.")
        if st.button("✅ 📊 Data Handling", use_container_width=True, key="btn_data_home"):
            _go_to(PAGE_DATA_HANDLING)
    with col2:
        st.markdown("### 📈 Analysis")
        st.markdown("Descriptive statistics, charts, outliers, missing values and correlation.")
        if st.button("✅ 📈 Analysis", use_container_width=True, key="btn_analysis_home"):
            _go_to(PAGE_ANALYSIS)
    with col3:
        st.markdown("### ⚖️ Comparison")
        st.markdown("Compare same-named columns across files and export the differences.")
        if st.button("✅ ⚖️ Comparison", use_container_width=True, key="btn_comparison_home"):
            _go_to(PAGE_COMPARISON)


def main_content():
    init_session_state(st.session_state)

    st.sidebar.markdown("## 📑 CSV Insight")
    st.sidebar.markdown("---")

    if st.sidebar.button("🏠 Home", use_container_width=True, key="nav_home"):
        _go_to(PAGE_HOME)
    if st.sidebar.button("📊 Data Handling", use_container_width=True, key="nav_data_handling"):
        _go_to(PAGE_DATA_HANDLING)
    if st.sidebar.button("📈 Analysis", use_container_width=True, key="nav_analysis"):
        _go_to(PAGE_ANALYSIS)
    if st.sidebar.button("⚖️ Comparison", use_container_width=True, key="nav_comparison"):
        _go_to(PAGE_COMPARISON)

    st.sidebar.markdown("---")

    with st.sidebar:
        st.markdown("### 📂 Datasets")
        files = get_workspace_files()
        if files:
            for data_file in files.values():
                st.markdown(f"**{data_file.name}**  \n{data_file.row_count} rows × {data_file.column_count} columns")
        else:
            st.info("📊 Upload a dataset in Data Handling")

    # Routing
    page = st.session_state[SESSION_CURRENT_PAGE]
    if page == PAGE_HOME:
        show_home()
    elif page == PAGE_DATA_HANDLING:
        data_handling_page.show()
    elif page == PAGE_ANALYSIS:
        analysis_page.show()
    elif page == PAGE_COMPARISON:
        comparison_page.show()
    else:
        st.error(f"Page '{page}' not found")
        _go_to(PAGE_HOME)


def main():
    st.set_page_config(
        page_title="CSV Insight",
        page_icon="📑",
        layout="wide",
        initial_sidebar_state="expanded"
    )
    main_content()


if __name__ == "__main__":
    main()
