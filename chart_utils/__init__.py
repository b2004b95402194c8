"""
Chart Utilities
Chart-ready data structures and the Plotly figures drawn from them
"""

from .chart_data import (
    ChartData,
    ChartDataset,
    ScatterData,
    TreeMapNode,
    find_label_column,
    prepare_bar_chart_data,
    prepare_pie_chart_data,
    prepare_histogram_data,
    prepare_scatter_plot_data,
    prepare_scatter_for_references,
    prepare_tree_map_data
)

from .chart_plots import (
    create_bar_chart,
    create_pie_chart,
    create_histogram,
    create_scatter_plot,
    create_tree_map,
    create_correlation_heatmap
)

__all__ = [
    # Data
    'ChartData',
    'ChartDataset',
    'ScatterData',
    'TreeMapNode',
    'find_label_column',
    'prepare_bar_chart_data',
    'prepare_pie_chart_data',
    'prepare_histogram_data',
    'prepare_scatter_plot_data',
    'prepare_scatter_for_references',
    'prepare_tree_map_data',
    # Plots
    'create_bar_chart',
    'create_pie_chart',
    'create_histogram',
    'create_scatter_plot',
    'create_tree_map',
    'create_correlation_heatmap'
]
