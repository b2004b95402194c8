"""
Analysis Page
=============

Streamlit page module for column statistics, charts, outliers,
missing values and correlation. Follows the same pattern as the other
page modules (show() entry point).
"""

import traceback

import streamlit as st

from chart_utils import (
    create_bar_chart,
    create_histogram,
    create_pie_chart,
    create_scatter_plot,
    create_tree_map,
    find_label_column,
    prepare_bar_chart_data,
    prepare_histogram_data,
    prepare_pie_chart_data,
    prepare_scatter_for_references,
    prepare_tree_map_data,
)
from config import get_config
from eda_utils.eda_workspace import (
    render_correlation_tab,
    render_missing_values_tab,
    render_outliers_tab,
    render_statistics_tab,
)
from workspace_utils import display_workspace_dataset_selector, get_summary_cache, get_workspace_files


def _render_charts(data_file, key_prefix="charts"):
    """Bar, pie, histogram, treemap and scatter charts for one dataset."""
    config = get_config()
    numeric = data_file.numeric_columns
    if not numeric:
        st.info("This dataset has no numeric columns to chart.")
        return

    headers = data_file.headers
    label_default = find_label_column(data_file.data, headers)

    col1, col2 = st.columns(2)
    with col1:
        value_col = st.selectbox(
            "Value column",
            options=numeric,
            format_func=lambda col: col['name'],
            key=f"{key_prefix}_value",
        )
    with col2:
        label_index = st.selectbox(
            "Label column",
            options=list(range(len(headers))),
            index=label_default,
            format_func=lambda i: headers[i] or f"Column {i + 1}",
            key=f"{key_prefix}_label",
        )

    chart_bar, chart_pie, chart_hist, chart_tree, chart_scatter = st.tabs(
        ["Bar", "Pie", "Histogram", "Tree Map", "Scatter"]
    )

    with chart_bar:
        bar = prepare_bar_chart_data(data_file.data, label_index, value_col['index'], config.charts.BAR_LIMIT)
        if bar.labels:
            st.plotly_chart(
                create_bar_chart(bar, f"Top {value_col['name']}", headers[label_index], value_col['name']),
                use_container_width=True,
            )
        else:
            st.info("No numeric values in the first rows of this column.")

    with chart_pie:
        pie = prepare_pie_chart_data(
            data_file.data, label_index, value_col['index'],
            config.charts.PIE_LIMIT, config.charts.PIE_OTHERS_THRESHOLD,
        )
        if pie.labels:
            st.plotly_chart(create_pie_chart(pie, f"{value_col['name']} by {headers[label_index]}"),
                            use_container_width=True)
        else:
            st.info("No numeric values in the first rows of this column.")

    with chart_hist:
        bins = st.slider("Bins", min_value=1, max_value=50, value=config.charts.HISTOGRAM_BINS,
                         key=f"{key_prefix}_bins")
        histogram = prepare_histogram_data(data_file.data, value_col['index'], bins)
        st.plotly_chart(create_histogram(histogram, value_col['name']), use_container_width=True)

    with chart_tree:
        nodes = prepare_tree_map_data(data_file.data, value_col['index'], config.charts.TREEMAP_LIMIT)
        if nodes:
            st.plotly_chart(create_tree_map(nodes, f"{value_col['name']} Tree Map"), use_container_width=True)
        else:
            st.info("No numeric values in the first rows of this column.")

    with chart_scatter:
        _render_scatter(key_prefix)


def _render_scatter(key_prefix):
    """Scatter of two selected columns; both must come from the same file."""
    config = get_config()
    files = get_workspace_files()

    options = {}
    for data_file in files.values():
        for reference in data_file.column_references():
            options[reference.key] = reference

    if len(options) < 2:
        st.info("At least two numeric columns are needed for a scatter plot.")
        return

    keys = list(options.keys())
    col1, col2 = st.columns(2)
    with col1:
        x_key = st.selectbox("X axis", keys, index=0,
                             format_func=lambda k: f"{options[k].file_name} - {options[k].column_name}",
                             key=f"{key_prefix}_x")
    with col2:
        y_key = st.selectbox("Y axis", keys, index=1,
                             format_func=lambda k: f"{options[k].file_name} - {options[k].column_name}",
                             key=f"{key_prefix}_y")

    x_ref, y_ref = options[x_key], options[y_key]
    scatter = prepare_scatter_for_references(files, x_ref, y_ref, config.charts.SCATTER_LIMIT)
    if scatter is None:
        st.warning("⚠️ X and Y columns must come from the same file.")
        return
    if not scatter.points:
        st.info("No rows with numeric values in both columns.")
        return

    st.plotly_chart(create_scatter_plot(scatter, x_ref.column_name, y_ref.column_name),
                    use_container_width=True)


def show():
    """
    Main entry point called by homepage.py router.
    """
    st.title("📈 Analysis")
    st.markdown(
        "Descriptive statistics, charts, outlier detection, missing-value handling "
        "and correlation for the uploaded datasets."
    )

    files = get_workspace_files()
    if not files:
        st.warning("⚠️ **No datasets available in workspace.**")
        st.info("💡 Upload CSV files in the **Data Handling** page first")
        return

    tab_stats, tab_charts, tab_outliers, tab_missing, tab_corr = st.tabs(
        ["📋 Statistics", "📊 Charts", "🎯 Outliers", "🕳️ Missing Values", "🔗 Correlation"]
    )

    try:
        with tab_stats:
            render_statistics_tab(files, get_summary_cache())

        with tab_charts:
            data_file = display_workspace_dataset_selector(
                label="Select dataset:", key="charts_dataset_selector", show_info=False
            )
            if data_file is not None:
                _render_charts(data_file)

        with tab_outliers:
            data_file = display_workspace_dataset_selector(
                label="Select dataset:", key="outliers_dataset_selector", show_info=False
            )
            if data_file is not None:
                render_outliers_tab(data_file)

        with tab_missing:
            data_file = display_workspace_dataset_selector(
                label="Select dataset:", key="missing_dataset_selector", show_info=False
            )
            if data_file is not None:
                render_missing_values_tab(data_file)

        with tab_corr:
            data_file = display_workspace_dataset_selector(
                label="Select dataset:", key="corr_dataset_selector", show_info=False
            )
            if data_file is not None:
                render_correlation_tab(data_file)

    except Exception as e:
        st.error(f"❌ Analysis failed: {str(e)}")
        st.code(traceback.format_exc())
