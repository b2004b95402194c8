"""
Data handling utility modules for CSV Insight
"""

from .logging_config import (
    setup_logging,
    get_logger
)

from .data_loaders import (
    ColumnReference,
    DataFile,
    parse_csv,
    serialize_csv,
    get_cell,
    to_float,
    is_numeric,
    get_numeric_columns,
    decode_uploaded_bytes,
    generate_file_id,
    create_data_file,
    load_uploaded_file
)

from .data_validation import (
    ValidationIssue,
    FileValidation,
    validate_csv_data,
    remove_duplicate_rows
)

from .data_exporters import (
    format_export_number,
    format_statistics_for_export,
    format_comparison_for_export,
    format_outliers_for_export,
    format_correlation_for_export,
    statistics_to_dataframe,
    export_statistics_to_excel
)

from .data_workspace import (
    apply_matrix_transform,
    derive_file_name,
    save_original_to_history,
    record_transform,
    known_upload_keys
)

__all__ = [
    # Logging
    'setup_logging',
    'get_logger',
    # Loaders
    'ColumnReference',
    'DataFile',
    'parse_csv',
    'serialize_csv',
    'get_cell',
    'to_float',
    'is_numeric',
    'get_numeric_columns',
    'decode_uploaded_bytes',
    'generate_file_id',
    'create_data_file',
    'load_uploaded_file',
    # Validation
    'ValidationIssue',
    'FileValidation',
    'validate_csv_data',
    'remove_duplicate_rows',
    # Exporters
    'format_export_number',
    'format_statistics_for_export',
    'format_comparison_for_export',
    'format_outliers_for_export',
    'format_correlation_for_export',
    'statistics_to_dataframe',
    'export_statistics_to_excel',
    # Workspace
    'apply_matrix_transform',
    'derive_file_name',
    'save_original_to_history',
    'record_transform',
    'known_upload_keys'
]
