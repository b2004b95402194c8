"""
Outlier Detection Module
========================

IQR and Z-score outlier detection over a list of numeric values.

Indices returned by the detectors are positions in the input list (the
numeric values after extraction), not matrix rows. Use
``detect_column_outliers`` or ``map_outlier_rows`` to get matrix row numbers.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from utils.logging_config import get_logger

from .eda_calculations import extract_numeric_values_with_rows, index_quartiles

logger = get_logger("outliers")

OUTLIER_METHODS = ('iqr', 'zscore')
DEFAULT_IQR_MULTIPLIER = 1.5
DEFAULT_ZSCORE_THRESHOLD = 3.0
ZSCORE_THRESHOLD_OPTIONS = (2.0, 2.5, 3.0)


@dataclass
class OutlierResult:
    """Outlier values and their positions in the analysed value list."""
    outliers: List[float] = field(default_factory=list)
    outlier_indices: List[int] = field(default_factory=list)
    row_indices: Optional[List[int]] = None
    method: str = 'iqr'
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    threshold: Optional[float] = None

    @property
    def count(self) -> int:
        return len(self.outliers)


def detect_outliers_iqr(
    values: Sequence[float],
    multiplier: float = DEFAULT_IQR_MULTIPLIER
) -> OutlierResult:
    """
    Flag values outside [q1 - 1.5*iqr, q3 + 1.5*iqr].

    Quartiles use the same index convention as the statistics engine.

    Parameters
    ----------
    values : sequence of float
    multiplier : float, default 1.5

    Returns
    -------
    OutlierResult
    """
    if len(values) == 0:
        return OutlierResult(method='iqr', threshold=multiplier)

    sorted_values = sorted(values)
    q1, q3 = index_quartiles(sorted_values)
    iqr = q3 - q1

    lower_bound = q1 - multiplier * iqr
    upper_bound = q3 + multiplier * iqr

    result = OutlierResult(
        method='iqr',
        lower_bound=lower_bound,
        upper_bound=upper_bound,
        threshold=multiplier,
    )
    for index, value in enumerate(values):
        if value < lower_bound or value > upper_bound:
            result.outliers.append(value)
            result.outlier_indices.append(index)

    return result


def detect_outliers_zscore(
    values: Sequence[float],
    threshold: float = DEFAULT_ZSCORE_THRESHOLD
) -> OutlierResult:
    """
    Flag values whose |x - mean| / stdDev exceeds the threshold.

    Mean and stdDev are population statistics of the unsorted input.
    A zero (constant column) or non-finite stdDev yields no outliers.

    Parameters
    ----------
    values : sequence of float
    threshold : float, default 3.0

    Returns
    -------
    OutlierResult
    """
    result = OutlierResult(method='zscore', threshold=threshold)
    if len(values) == 0:
        return result

    arr = np.asarray(values, dtype=float)
    mean = float(np.sum(arr) / len(arr))
    std_dev = math.sqrt(float(np.sum((arr - mean) ** 2) / len(arr)))

    if std_dev == 0 or not math.isfinite(std_dev):
        logger.debug("Zero or non-finite standard deviation: no z-score outliers")
        return result

    result.lower_bound = mean - threshold * std_dev
    result.upper_bound = mean + threshold * std_dev

    z_scores = np.abs(arr - mean) / std_dev
    for index, z_score in enumerate(z_scores):
        if z_score > threshold:
            result.outliers.append(values[index])
            result.outlier_indices.append(index)

    return result


def detect_outliers(
    values: Sequence[float],
    method: str = 'iqr',
    threshold: Optional[float] = None
) -> OutlierResult:
    """
    Dispatch to the IQR or Z-score detector.

    ``threshold`` is the IQR multiplier for 'iqr' and the z cut-off for 'zscore'.
    """
    if method == 'iqr':
        return detect_outliers_iqr(values, DEFAULT_IQR_MULTIPLIER if threshold is None else threshold)
    if method == 'zscore':
        return detect_outliers_zscore(values, DEFAULT_ZSCORE_THRESHOLD if threshold is None else threshold)
    raise ValueError(f"Unknown outlier method: {method}")


def map_outlier_rows(result: OutlierResult, row_numbers: Sequence[int]) -> OutlierResult:
    """
    Attach matrix row numbers to a detector result.

    Parameters
    ----------
    result : OutlierResult
        Result with positional ``outlier_indices``
    row_numbers : sequence of int
        row_numbers[i] is the matrix row of the i-th analysed value

    Returns
    -------
    OutlierResult
        Copy with ``row_indices`` filled
    """
    return OutlierResult(
        outliers=list(result.outliers),
        outlier_indices=list(result.outlier_indices),
        row_indices=[row_numbers[i] for i in result.outlier_indices],
        method=result.method,
        lower_bound=result.lower_bound,
        upper_bound=result.upper_bound,
        threshold=result.threshold,
    )


def detect_column_outliers(
    data: Sequence[Sequence[Any]],
    column_index: int,
    method: str = 'iqr',
    threshold: Optional[float] = None
) -> OutlierResult:
    """
    Extract a column's numeric values and detect outliers in them.

    The result carries both positional indices and matrix row numbers.
    """
    values, row_numbers = extract_numeric_values_with_rows(data, column_index)
    result = detect_outliers(values, method, threshold)
    logger.debug(f"{method} outliers in column {column_index}: {result.count} of {len(values)}")
    return map_outlier_rows(result, row_numbers)


def summarize_outliers(result: OutlierResult) -> Dict[str, Any]:
    """Min, max, mean and count of the flagged values."""
    if not result.outliers:
        return {'min': None, 'max': None, 'mean': None, 'count': 0}

    return {
        'min': min(result.outliers),
        'max': max(result.outliers),
        'mean': sum(result.outliers) / len(result.outliers),
        'count': len(result.outliers),
    }


def remove_outlier_rows(
    data: Sequence[Sequence[Any]],
    result: OutlierResult
) -> List[List[Any]]:
    """
    New matrix without the rows flagged in ``result``.

    Requires matrix row numbers (``detect_column_outliers`` or
    ``map_outlier_rows``). The header row is always kept.
    """
    if result.row_indices is None:
        raise ValueError("OutlierResult has no row mapping; use detect_column_outliers or map_outlier_rows")

    flagged = set(result.row_indices)
    cleaned = [list(row) for index, row in enumerate(data) if index == 0 or index not in flagged]
    logger.debug(f"Removed {len(data) - len(cleaned)} outlier rows")
    return cleaned
