"""
Comparison Page
Compare the statistics of same-named columns across uploaded files
"""

import traceback
from datetime import datetime

import pandas as pd
import streamlit as st

from color_utils import get_difference_color
from comparison_utils import (
    compare_datasets,
    comparison_inputs_from_selection,
    generate_comparison_table_data,
)
from config import get_config
from session_state_keys import SESSION_COMPARISON_RESULTS
from utils.data_exporters import export_statistics_to_excel, format_comparison_for_export
from workspace_utils import display_column_selector, get_workspace_files


def _style_differences(table: pd.DataFrame):
    diff_columns = [col for col in table.columns if col.startswith('diff-')]

    def color(value):
        try:
            number = float(value)
        except (TypeError, ValueError):
            return ''
        return f"color: {get_difference_color(number)}"

    return table.style.map(color, subset=diff_columns)


def show():
    """Main entry point called by homepage.py router."""
    st.title("⚖️ Dataset Comparison")
    st.markdown(
        "Columns with the same header in two or more files are compared side by side. "
        "With exactly two files the differences (first − second) are shown."
    )

    files = get_workspace_files()
    if len(files) < 2:
        st.warning("⚠️ Upload at least two CSV files to compare them.")
        return

    references = display_column_selector(files, label="Columns to compare:", key="comparison_columns")
    if not references:
        st.info("Select columns from at least two files.")
        return

    try:
        inputs = comparison_inputs_from_selection(files, references)
        results = compare_datasets(inputs)
    except Exception as e:
        st.error(f"❌ Comparison failed: {str(e)}")
        st.code(traceback.format_exc())
        return

    st.session_state[SESSION_COMPARISON_RESULTS] = results

    if not results:
        st.info("No selected column name appears in more than one file.")
        return

    table = pd.DataFrame(generate_comparison_table_data(results)).rename(columns={'columnName': 'Column'})
    st.dataframe(_style_differences(table), use_container_width=True, hide_index=True)

    config = get_config()
    stamp = datetime.now().strftime('%Y-%m-%d')
    col_csv, col_xlsx = st.columns(2)
    with col_csv:
        st.download_button(
            label="⬇️  Download CSV",
            data=format_comparison_for_export(
                results, config.export.EXPONENTIAL_THRESHOLD, config.export.EXPONENTIAL_DIGITS
            ),
            file_name=f"dataset-comparison-{stamp}.csv",
            mime="text/csv",
            key="comparison_dl_csv",
        )
    with col_xlsx:
        st.download_button(
            label="⬇️  Download Excel",
            data=export_statistics_to_excel({}, {}, comparison_results=results),
            file_name=f"dataset-comparison-{stamp}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key="comparison_dl_excel",
        )
