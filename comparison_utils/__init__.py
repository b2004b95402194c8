"""
Comparison Utilities
Cross-dataset comparison of same-named columns
"""

from .comparison import (
    ComparisonInput,
    ComparisonResult,
    DatasetComparisonEntry,
    Difference,
    build_column_name_index,
    compare_datasets,
    comparison_inputs_from_selection,
    generate_comparison_table_data
)

__all__ = [
    'ComparisonInput',
    'ComparisonResult',
    'DatasetComparisonEntry',
    'Difference',
    'build_column_name_index',
    'compare_datasets',
    'comparison_inputs_from_selection',
    'generate_comparison_table_data'
]
