"""
Data export functions for various formats
Statistics, comparison and outlier tables as CSV text, statistics as Excel
"""

import math
from io import BytesIO

import pandas as pd

EXPONENTIAL_THRESHOLD = 1e-4
EXPONENTIAL_DIGITS = 4
MISSING_LABEL = 'N/A'
INTEGER_TEXT_LIMIT = 1e21

STATISTICS_HEADER = [
    'Column Name', 'File Name', 'Mean', 'Median', 'Min', 'Max',
    'Standard Deviation', 'Variance', 'Count'
]

COMPARISON_STATS = [
    ('Mean', 'mean'),
    ('Median', 'median'),
    ('StdDev', 'std_dev'),
    ('Min', 'min'),
    ('Max', 'max'),
]


def _exponential(value, digits):
    # "1.2345e-05" -> "1.2345e-5", "0.0000e+00" -> "0.0000e+0"
    mantissa, exponent = f"{value:.{digits}e}".split('e')
    sign = exponent[0]
    return f"{mantissa}e{sign}{int(exponent[1:])}"


def format_export_number(value, threshold=EXPONENTIAL_THRESHOLD, digits=EXPONENTIAL_DIGITS):
    """
    Format one number for CSV export

    Parameters:
    -----------
    value : float, int or None
    threshold : float
        Magnitudes below this use exponential notation
    digits : int
        Fraction digits of the exponential form

    Returns:
    --------
    str : 'N/A' for None or non-finite values, exponential text for
          tiny magnitudes (zero included), plain text otherwise
    """
    if value is None or isinstance(value, bool):
        return MISSING_LABEL

    value = float(value)
    if not math.isfinite(value):
        return MISSING_LABEL
    if value == 0:
        value = 0.0  # no "-0"

    if abs(value) < threshold:
        return _exponential(value, digits)

    # 1e21 and above keep exponent notation ("1e+21")
    if value.is_integer() and abs(value) < INTEGER_TEXT_LIMIT:
        return str(int(value))
    return repr(value)


def quote_text(text):
    """Quote a CSV text field, doubling embedded quotes"""
    text = '' if text is None else str(text)
    return '"' + text.replace('"', '""') + '"'


def format_statistics_for_export(summaries, selected_columns, threshold=EXPONENTIAL_THRESHOLD, digits=EXPONENTIAL_DIGITS):
    """
    Statistics map to CSV text

    Parameters:
    -----------
    summaries : dict
        {column key: DatasetSummary}
    selected_columns : dict
        {column key: ColumnReference} giving column and file names

    Returns:
    --------
    str : CSV with a fixed header row; keys without selection
          metadata are skipped
    """
    lines = [','.join(STATISTICS_HEADER)]

    for key, summary in summaries.items():
        reference = selected_columns.get(key)
        if reference is None:
            continue

        count = summary.count if summary.count is not None else 0
        lines.append(','.join([
            quote_text(reference.column_name),
            quote_text(reference.file_name),
            format_export_number(summary.mean, threshold, digits),
            format_export_number(summary.median, threshold, digits),
            format_export_number(summary.min, threshold, digits),
            format_export_number(summary.max, threshold, digits),
            format_export_number(summary.std_dev, threshold, digits),
            format_export_number(summary.variance, threshold, digits),
            str(int(count)),
        ]))

    return '\n'.join(lines) + '\n'


def format_comparison_for_export(results, threshold=EXPONENTIAL_THRESHOLD, digits=EXPONENTIAL_DIGITS):
    """
    Comparison results to CSV text

    One block of Mean/Median/StdDev/Min/Max columns per dataset name
    (first appearance order); Difference columns follow when exactly two
    datasets take part.
    """
    dataset_names = []
    for result in results:
        for entry in result.datasets:
            if entry.dataset_name not in dataset_names:
                dataset_names.append(entry.dataset_name)

    header = ['Column Name']
    for name in dataset_names:
        header.extend(f"{name} ({label})" for label, _ in COMPARISON_STATS)
    with_differences = len(dataset_names) == 2
    if with_differences:
        header.extend(f"Difference ({label})" for label, _ in COMPARISON_STATS)

    lines = [','.join(quote_text(cell) if ',' in cell or '"' in cell else cell for cell in header)]

    for result in results:
        row = [quote_text(result.column_name)]
        by_name = {entry.dataset_name: entry for entry in result.datasets}

        for name in dataset_names:
            entry = by_name.get(name)
            if entry is None:
                row.extend([MISSING_LABEL] * len(COMPARISON_STATS))
            else:
                row.extend(format_export_number(getattr(entry.stats, attr), threshold, digits) for _, attr in COMPARISON_STATS)

        if with_differences and result.differences:
            diff = result.differences[0]
            row.extend(format_export_number(getattr(diff, attr), threshold, digits) for _, attr in COMPARISON_STATS)

        lines.append(','.join(row))

    return '\n'.join(lines) + '\n'


def format_outliers_for_export(result, threshold=EXPONENTIAL_THRESHOLD, digits=EXPONENTIAL_DIGITS):
    """
    Outliers to CSV text: 'Index,Value' with 1-based positions

    Parameters:
    -----------
    result : OutlierResult

    Returns:
    --------
    str : CSV text (header only when there are no outliers)
    """
    lines = ['Index,Value']
    for index, value in zip(result.outlier_indices, result.outliers):
        lines.append(f"{index + 1},{format_export_number(value, threshold, digits)}")
    return '\n'.join(lines) + '\n'


def format_correlation_for_export(matrix, names, decimals=4):
    """
    Correlation matrix to CSV text

    Parameters:
    -----------
    matrix : list of lists
        Square matrix aligned with names
    names : list of str
        Column names, used for the header and the first cell of each row
    decimals : int

    Returns:
    --------
    str : 'Column,<names...>' header, then one row per name; NaN cells
          are left empty
    """
    def cell(text):
        text = str(text)
        return quote_text(text) if ',' in text or '"' in text else text

    lines = [','.join(['Column'] + [cell(name) for name in names])]
    for name, row in zip(names, matrix):
        values = ['' if value != value else f"{value:.{decimals}f}" for value in row]
        lines.append(','.join([cell(name)] + values))
    return '\n'.join(lines) + '\n'


def statistics_to_dataframe(summaries, selected_columns):
    """Statistics map as a DataFrame with the export column names"""
    records = []
    for key, summary in summaries.items():
        reference = selected_columns.get(key)
        if reference is None:
            continue
        records.append({
            'Column Name': reference.column_name,
            'File Name': reference.file_name,
            'Mean': summary.mean,
            'Median': summary.median,
            'Min': summary.min,
            'Max': summary.max,
            'Standard Deviation': summary.std_dev,
            'Variance': summary.variance,
            'Count': summary.count,
            'Q1': summary.q1,
            'Q3': summary.q3,
            'Skewness': summary.skewness,
            'Kurtosis': summary.kurtosis,
        })
    return pd.DataFrame(records, columns=STATISTICS_HEADER + ['Q1', 'Q3', 'Skewness', 'Kurtosis'])


def export_statistics_to_excel(summaries, selected_columns, comparison_results=None):
    """
    Statistics (and optionally comparison results) as an Excel workbook

    Parameters:
    -----------
    summaries : dict
        {column key: DatasetSummary}
    selected_columns : dict
        {column key: ColumnReference}
    comparison_results : list of ComparisonResult, optional
        Written to a second sheet when given

    Returns:
    --------
    BytesIO : workbook bytes, rewound and ready for download
    """
    output = BytesIO()

    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        statistics_to_dataframe(summaries, selected_columns).to_excel(
            writer, sheet_name='Statistics', index=False
        )

        if comparison_results:
            rows = []
            for result in comparison_results:
                for entry in result.datasets:
                    rows.append({
                        'Column Name': result.column_name,
                        'Dataset': entry.dataset_name,
                        'Mean': entry.stats.mean,
                        'Median': entry.stats.median,
                        'StdDev': entry.stats.std_dev,
                        'Min': entry.stats.min,
                        'Max': entry.stats.max,
                        'Variance': entry.stats.variance,
                        'Count': entry.stats.count,
                    })
            pd.DataFrame(rows).to_excel(writer, sheet_name='Comparison', index=False)

    output.seek(0)
    return output
