"""
EDA Workspace Module
====================

Streamlit tab renderers for the analysis page.

Key public functions
--------------------
render_statistics_tab(files, cache, key_prefix)        → statistics table, summary report, exports
render_outliers_tab(data_file, key_prefix)             → IQR / Z-score detection and removal
render_missing_values_tab(data_file, key_prefix)       → missing-value stats and handling
render_correlation_tab(data_file, key_prefix)          → correlation heatmap
"""

import traceback
from datetime import datetime
from typing import Dict

import pandas as pd
import streamlit as st

from config import get_config
from session_state_keys import SESSION_OUTLIER_RESULT, SESSION_SELECTED_COLUMNS, SESSION_SUMMARIES
from utils.data_exporters import (
    export_statistics_to_excel,
    format_correlation_for_export,
    format_outliers_for_export,
    format_statistics_for_export,
)
from utils.data_loaders import DataFile

from .eda_calculations import (
    CORRELATION_METHODS,
    calculate_correlation_matrix,
    extract_numeric_values,
    summaries_to_dataframe,
)
from .eda_plots import plot_outliers, plot_summary_report
from .missing_values import MISSING_VALUE_METHODS, calculate_missing_stats, handle_missing_values
from .outliers import OUTLIER_METHODS, detect_column_outliers, remove_outlier_rows, summarize_outliers
from .summary_cache import SummaryCache

_STATISTICS_COLUMNS = {
    'column_name': 'Column',
    'mean': 'Mean',
    'median': 'Median',
    'min': 'Min',
    'max': 'Max',
    'std_dev': 'StdDev',
    'variance': 'Variance',
    'q1': 'Q1',
    'q3': 'Q3',
    'count': 'Count',
    'skewness': 'Skewness',
    'kurtosis': 'Kurtosis',
}


def _fmt(value, digits=4):
    if value is None or value != value:
        return 'N/A'
    return f"{value:.{digits}f}"


def _commit(data_file, new_matrix, transform_name, fork, params):
    # Imported here: workspace_utils imports this package
    from workspace_utils import commit_transform
    return commit_transform(data_file, new_matrix, transform_name, fork=fork, params=params)


# ─────────────────────────────────────────────────────────────
#  STATISTICS
# ─────────────────────────────────────────────────────────────

def render_statistics_tab(
    files: Dict[str, DataFile],
    cache: SummaryCache,
    key_prefix: str = "stats",
) -> None:
    """
    Statistics for the selected columns of all uploaded files.

    Layout
    ------
    - Column multiselect (numeric columns of every file)
    - Statistics table
    - Summary report for one selected column
    - CSV / Excel downloads
    """
    from workspace_utils import display_column_selector

    config = get_config()

    references = display_column_selector(files, key=f"{key_prefix}_columns")
    selected = {reference.key: reference for reference in references}

    summaries = {}
    for key, reference in selected.items():
        summaries[key] = cache.get_summary(files[reference.file_id], reference.column_index, reference.column_name)

    st.session_state[SESSION_SELECTED_COLUMNS] = selected
    st.session_state[SESSION_SUMMARIES] = summaries

    if not summaries:
        st.info("Select one or more numeric columns to compute statistics.")
        return

    table = summaries_to_dataframe(summaries)
    table.insert(0, 'File', [selected[key].file_name for key in table['key']])
    table = table.drop(columns='key').rename(columns=_STATISTICS_COLUMNS)
    st.dataframe(table.round(4), use_container_width=True, hide_index=True)

    # ── Summary report ──────────────────────────────────────────
    report_key = st.selectbox(
        "Summary report for",
        options=list(summaries.keys()),
        format_func=lambda key: f"{selected[key].file_name} - {selected[key].column_name}",
        key=f"{key_prefix}_report_col",
    )
    reference = selected[report_key]
    values = extract_numeric_values(files[reference.file_id].data, reference.column_index)
    fig = plot_summary_report(
        values,
        column_name=reference.column_name,
        summary=summaries[report_key],
        n_bins=config.charts.HISTOGRAM_BINS,
    )
    st.plotly_chart(fig, use_container_width=True)

    # ── Export ──────────────────────────────────────────────────
    st.markdown("#### 💾 Export")
    stamp = datetime.now().strftime('%Y-%m-%d')
    col_csv, col_xlsx = st.columns(2)
    with col_csv:
        st.download_button(
            label="⬇️  Download CSV",
            data=format_statistics_for_export(
                summaries, selected,
                config.export.EXPONENTIAL_THRESHOLD, config.export.EXPONENTIAL_DIGITS
            ),
            file_name=f"data-analysis-{stamp}.csv",
            mime="text/csv",
            key=f"{key_prefix}_dl_csv",
        )
    with col_xlsx:
        st.download_button(
            label="⬇️  Download Excel",
            data=export_statistics_to_excel(summaries, selected),
            file_name=f"data-analysis-{stamp}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key=f"{key_prefix}_dl_excel",
        )


# ─────────────────────────────────────────────────────────────
#  OUTLIERS
# ─────────────────────────────────────────────────────────────

def render_outliers_tab(data_file: DataFile, key_prefix: str = "outliers") -> None:
    """IQR / Z-score detection on one column, with CSV export and row removal."""
    config = get_config()

    numeric = data_file.numeric_columns
    if not numeric:
        st.info("This dataset has no numeric columns.")
        return

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        column = st.selectbox(
            "Column",
            options=numeric,
            format_func=lambda col: col['name'],
            key=f"{key_prefix}_column",
        )
    with col2:
        method = st.radio(
            "Method",
            options=list(OUTLIER_METHODS),
            index=list(OUTLIER_METHODS).index(config.outliers.DEFAULT_METHOD),
            format_func=lambda m: 'IQR' if m == 'iqr' else 'Z-score',
            horizontal=True,
            key=f"{key_prefix}_method",
        )
    with col3:
        if method == 'zscore':
            options = list(config.outliers.ZSCORE_THRESHOLD_OPTIONS)
            default = config.outliers.ZSCORE_THRESHOLD
            threshold = st.selectbox(
                "Threshold",
                options=options,
                index=options.index(default) if default in options else len(options) - 1,
                key=f"{key_prefix}_threshold",
            )
        else:
            threshold = config.outliers.IQR_MULTIPLIER
            st.metric("IQR multiplier", threshold)

    try:
        values = extract_numeric_values(data_file.data, column['index'])
        result = detect_column_outliers(data_file.data, column['index'], method, threshold)
    except Exception as e:
        st.error(f"❌ Outlier detection failed: {e}")
        st.code(traceback.format_exc())
        return

    st.session_state[SESSION_OUTLIER_RESULT] = {'file_id': data_file.id, 'column': column, 'result': result}

    stats = summarize_outliers(result)
    share = (stats['count'] / len(values) * 100) if values else 0.0
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Outliers", f"{stats['count']} ({share:.1f}%)")
    m2.metric("Min", _fmt(stats['min'], 2))
    m3.metric("Max", _fmt(stats['max'], 2))
    m4.metric("Mean", _fmt(stats['mean'], 2))

    st.plotly_chart(plot_outliers(values, result, column['name']), use_container_width=True)

    if not result.outliers:
        st.success("✅ No outliers found with the current settings.")
        return

    slug = f"{data_file.name.rsplit('.', 1)[0]}-{column['name']}".replace(' ', '-').lower()
    st.download_button(
        label="⬇️  Export outliers CSV",
        data=format_outliers_for_export(
            result, config.export.EXPONENTIAL_THRESHOLD, config.export.EXPONENTIAL_DIGITS
        ),
        file_name=f"{slug}-outliers.csv",
        mime="text/csv",
        key=f"{key_prefix}_dl",
    )

    fork = st.checkbox("Keep original (save as new dataset)", value=True, key=f"{key_prefix}_fork")
    if st.button("🧹 Remove outlier rows", key=f"{key_prefix}_remove"):
        try:
            cleaned = remove_outlier_rows(data_file.data, result)
            new_file = _commit(
                data_file, cleaned, "Outliers Removed", fork,
                {'column': column['name'], 'method': method, 'threshold': threshold},
            )
            st.success(f"✅ Removed {result.count} rows → **{new_file.name}**")
            st.rerun()
        except Exception as e:
            st.error(f"❌ Could not remove outliers: {e}")
            st.code(traceback.format_exc())


# ─────────────────────────────────────────────────────────────
#  MISSING VALUES
# ─────────────────────────────────────────────────────────────

_METHOD_LABELS = {
    'remove': 'Remove rows with missing values',
    'mean': 'Replace with column mean',
    'median': 'Replace with column median',
    'value': 'Replace with a custom value',
}


def render_missing_values_tab(data_file: DataFile, key_prefix: str = "missing") -> None:
    """Missing-value statistics and the four handling strategies."""
    stats = calculate_missing_stats(data_file.data)

    m1, m2, m3 = st.columns(3)
    m1.metric("Missing cells", stats['missing'])
    m2.metric("Total cells", stats['total'])
    m3.metric("Missing", f"{stats['percentage']:.1f}%")

    if stats['missing'] == 0:
        st.success("✅ No missing values in this dataset.")
        return

    st.markdown("**Columns with the most missing values**")
    st.dataframe(
        pd.DataFrame(stats['top_columns']).rename(columns={'name': 'Column', 'count': 'Missing'}),
        use_container_width=True,
        hide_index=True,
    )

    method = st.selectbox(
        "Strategy",
        options=list(MISSING_VALUE_METHODS),
        format_func=lambda m: _METHOD_LABELS[m],
        key=f"{key_prefix}_method",
    )
    replacement = None
    if method == 'value':
        replacement = st.text_input("Replacement value", value="0", key=f"{key_prefix}_value")

    fork = st.checkbox("Keep original (save as new dataset)", value=True, key=f"{key_prefix}_fork")

    if st.button("Apply", key=f"{key_prefix}_apply"):
        try:
            new_matrix = handle_missing_values(data_file.data, method, replacement)
            new_file = _commit(
                data_file, new_matrix, f"Missing {method.capitalize()}", fork,
                {'method': method, 'replacement': replacement},
            )
            st.success(f"✅ Missing values handled → **{new_file.name}**")
            st.rerun()
        except Exception as e:
            st.error(f"❌ Could not handle missing values: {e}")
            st.code(traceback.format_exc())


# ─────────────────────────────────────────────────────────────
#  CORRELATION
# ─────────────────────────────────────────────────────────────

def render_correlation_tab(data_file: DataFile, key_prefix: str = "corr") -> None:
    """Correlation matrix heatmap over the dataset's numeric columns."""
    from chart_utils import create_correlation_heatmap

    numeric = data_file.numeric_columns
    if len(numeric) < 2:
        st.info("At least two numeric columns are needed for a correlation matrix.")
        return

    col1, col2 = st.columns([1, 1])
    with col1:
        method = st.selectbox(
            "Method",
            options=list(CORRELATION_METHODS),
            format_func=str.capitalize,
            key=f"{key_prefix}_method",
        )
    with col2:
        highlight = st.slider(
            "Highlight |r| above", min_value=0.5, max_value=0.95, value=0.7, step=0.05,
            key=f"{key_prefix}_highlight",
        )

    indices = [col['index'] for col in numeric]
    names = [col['name'] for col in numeric]
    matrix = calculate_correlation_matrix(data_file.data, indices, method)

    st.plotly_chart(
        create_correlation_heatmap(matrix, names, method, highlight),
        use_container_width=True,
    )

    with st.expander("📋 Correlation table", expanded=False):
        st.dataframe(pd.DataFrame(matrix, index=names, columns=names).round(4), use_container_width=True)

    stem = data_file.name.rsplit('.', 1)[0] if '.' in data_file.name else data_file.name
    st.download_button(
        label="⬇️  Download correlation matrix (CSV)",
        data=format_correlation_for_export(matrix, names),
        file_name=f"{'-'.join(stem.lower().split())}-{method}-correlation-matrix.csv",
        mime="text/csv",
        key=f"{key_prefix}_dl_csv",
    )
