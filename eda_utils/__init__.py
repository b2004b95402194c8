"""
eda_utils: Exploratory Data Analysis for CSV Insight
=====================================================

Statistics, outlier detection and missing-value handling for the numeric
columns of parsed CSV matrices.

Package Structure
-----------------
eda_calculations  :  Descriptive statistics, correlation
outliers          :  IQR and Z-score detection, row mapping, removal
missing_values    :  Missing-value statistics and handling strategies
summary_cache     :  Memoised DatasetSummary per (file, column, version)
eda_plots         :  Plotly figures (plot_summary_report, plot_outliers)
eda_workspace     :  Streamlit tab renderers

Quick Start: standalone (no Streamlit)
-----------------------------------------
>>> from utils import parse_csv
>>> from eda_utils import calculate_statistics, detect_column_outliers
>>>
>>> data = parse_csv(open("sales.csv").read())
>>> summary = calculate_statistics(data, 1)
>>> result = detect_column_outliers(data, 1, method='zscore', threshold=2.0)
"""

from .eda_calculations import (
    CORRELATION_METHODS,
    DatasetSummary,
    extract_numeric_values,
    extract_numeric_values_with_rows,
    calculate_median,
    index_quartiles,
    summarize_values,
    calculate_statistics,
    summaries_to_dataframe,
    calculate_correlation,
    calculate_correlation_matrix
)

from .outliers import (
    OUTLIER_METHODS,
    ZSCORE_THRESHOLD_OPTIONS,
    OutlierResult,
    detect_outliers_iqr,
    detect_outliers_zscore,
    detect_outliers,
    map_outlier_rows,
    detect_column_outliers,
    summarize_outliers,
    remove_outlier_rows
)

from .missing_values import (
    MISSING_VALUE_METHODS,
    is_missing,
    parse_replacement_value,
    handle_missing_values,
    calculate_missing_stats
)

from .summary_cache import SummaryCache

from .eda_plots import (
    plot_summary_report,
    plot_outliers
)

__all__ = [
    # Calculations
    'CORRELATION_METHODS',
    'DatasetSummary',
    'extract_numeric_values',
    'extract_numeric_values_with_rows',
    'calculate_median',
    'index_quartiles',
    'summarize_values',
    'calculate_statistics',
    'summaries_to_dataframe',
    'calculate_correlation',
    'calculate_correlation_matrix',
    # Outliers
    'OUTLIER_METHODS',
    'ZSCORE_THRESHOLD_OPTIONS',
    'OutlierResult',
    'detect_outliers_iqr',
    'detect_outliers_zscore',
    'detect_outliers',
    'map_outlier_rows',
    'detect_column_outliers',
    'summarize_outliers',
    'remove_outlier_rows',
    # Missing values
    'MISSING_VALUE_METHODS',
    'is_missing',
    'parse_replacement_value',
    'handle_missing_values',
    'calculate_missing_stats',
    # Cache
    'SummaryCache',
    # Plots
    'plot_summary_report',
    'plot_outliers'
]
