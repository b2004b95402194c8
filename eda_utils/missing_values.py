"""
Missing Value Handling
======================

Imputation or removal of incomplete rows in a parsed CSV matrix, plus a
summary of where values are missing.
"""

import math
from typing import Any, Dict, List, Optional, Sequence

from utils.data_loaders import get_cell, is_numeric, to_float
from utils.logging_config import get_logger

from .eda_calculations import calculate_median

logger = get_logger("missing_values")

MISSING_VALUE_METHODS = ('remove', 'mean', 'median', 'value')


def is_missing(value: Any) -> bool:
    """A cell is missing when it is None or an empty string after trim."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ''


def parse_replacement_value(text: Any) -> Any:
    """Float when the replacement parses as a number, else the literal string."""
    if is_numeric(text):
        return to_float(text)
    return text


def _column_fill_values(data: Sequence[Sequence[Any]], width: int) -> Dict[int, Dict[str, float]]:
    """Mean and median per column over the column's present numeric cells."""
    fill_values = {}
    for col_index in range(width):
        numeric_values = []
        for row in data[1:]:
            value = get_cell(row, col_index)
            if is_missing(value):
                continue
            number = to_float(value)
            if math.isfinite(number):
                numeric_values.append(number)

        if numeric_values:
            fill_values[col_index] = {
                'mean': sum(numeric_values) / len(numeric_values),
                'median': calculate_median(sorted(numeric_values)),
            }
    return fill_values


def handle_missing_values(
    data: Sequence[Sequence[Any]],
    method: str,
    replacement_value: Optional[Any] = None
) -> List[List[Any]]:
    """
    Impute missing cells or drop incomplete rows.

    Parameters
    ----------
    data : matrix
        Parsed matrix, row 0 is the header (never modified)
    method : str
        'remove' : drop every data row holding a missing cell
        'mean'   : fill with the column mean of present numeric cells
        'median' : fill with the column median of present numeric cells
        'value'  : fill every missing cell with ``replacement_value``
    replacement_value : any, optional
        Used by 'value'; numeric strings become floats

    Returns
    -------
    list of list
        New matrix; the input is not mutated
    """
    if method not in MISSING_VALUE_METHODS:
        raise ValueError(f"Unknown missing value method: {method}")

    if len(data) <= 1:
        return [list(row) for row in data]

    headers = list(data[0])
    width = len(headers)

    fill_values = _column_fill_values(data, width) if method in ('mean', 'median') else {}
    if method == 'value' and replacement_value is not None:
        replacement_value = parse_replacement_value(replacement_value)

    result = [headers]
    removed = 0
    filled = 0

    for row in data[1:]:
        new_row = list(row)
        # Cells beyond a short row's end count as missing
        if len(new_row) < width:
            new_row.extend([None] * (width - len(new_row)))

        has_missing = False
        for col_index, value in enumerate(new_row):
            if not is_missing(value):
                continue
            has_missing = True

            if method in ('mean', 'median') and col_index in fill_values:
                new_row[col_index] = fill_values[col_index][method]
                filled += 1
            elif method == 'value' and replacement_value is not None:
                new_row[col_index] = replacement_value
                filled += 1

        if method == 'remove':
            if has_missing:
                removed += 1
                continue
            # Keep the row exactly as it was
            new_row = list(row)
        elif len(row) < width and all(is_missing(v) for v in new_row[len(row):]):
            # Nothing could fill the padding; keep the original length
            new_row = new_row[:len(row)]

        result.append(new_row)

    logger.debug(f"Missing values ({method}): {filled} cells filled, {removed} rows removed")
    return result


def calculate_missing_stats(data: Sequence[Sequence[Any]], top_n: int = 3) -> Dict[str, Any]:
    """
    Count missing cells overall and per column.

    Parameters
    ----------
    data : matrix
    top_n : int, default 3
        Number of worst columns to report

    Returns
    -------
    dict
        Keys: 'total', 'missing', 'percentage', 'per_column',
              'top_columns' ([{'name', 'count'}])
    """
    if not data:
        return {'total': 0, 'missing': 0, 'percentage': 0.0, 'per_column': {}, 'top_columns': []}

    headers = data[0]
    width = len(headers)
    total = (len(data) - 1) * width

    per_column = {col_index: 0 for col_index in range(width)}
    missing = 0
    for row in data[1:]:
        for col_index in range(width):
            if is_missing(get_cell(row, col_index)):
                missing += 1
                per_column[col_index] += 1

    top_columns = [
        {'name': headers[col_index] or f"Column {col_index + 1}", 'count': count}
        for col_index, count in sorted(per_column.items(), key=lambda item: -item[1])[:top_n]
    ]

    return {
        'total': total,
        'missing': missing,
        'percentage': (missing / total) * 100 if total > 0 else 0.0,
        'per_column': per_column,
        'top_columns': top_columns,
    }
