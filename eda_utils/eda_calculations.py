"""
EDA Calculations Module
=======================

Descriptive statistics for the numeric columns of a parsed CSV matrix.

Provides:
- Numeric extraction (with the filtered-position -> matrix-row mapping)
- DatasetSummary: mean, median, min, max, variance, stdDev, quartiles,
  skewness, excess kurtosis, count
- Pearson / Spearman / Kendall correlation between columns
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from utils.data_loaders import get_cell, to_float
from utils.logging_config import get_logger

logger = get_logger("eda_calculations")

CORRELATION_METHODS = ('pearson', 'spearman', 'kendall')


# ──────────────────────────────────────────────
#  TYPES
# ──────────────────────────────────────────────

@dataclass
class DatasetSummary:
    """
    Descriptive statistics snapshot for one column.

    Every statistic is None when the column holds no numeric values.
    Skewness and kurtosis are NaN for a constant column.
    """
    column_name: str = ""
    mean: Optional[float] = None
    median: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    std_dev: Optional[float] = None
    variance: Optional[float] = None
    q1: Optional[float] = None
    q3: Optional[float] = None
    count: int = 0
    skewness: Optional[float] = None
    kurtosis: Optional[float] = None

    @property
    def quartiles(self) -> Dict[str, Optional[float]]:
        return {'q1': self.q1, 'q3': self.q3}

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ──────────────────────────────────────────────
#  EXTRACTION
# ──────────────────────────────────────────────

def extract_numeric_values_with_rows(
    data: Sequence[Sequence[Any]],
    column_index: int
) -> Tuple[List[float], List[int]]:
    """
    Finite numeric values of a column plus their matrix row numbers.

    Parameters
    ----------
    data : matrix
        Parsed matrix, row 0 is the header
    column_index : int

    Returns
    -------
    (values, row_numbers)
        row_numbers[i] is the matrix row that produced values[i]
        (1-based relative to the matrix, since row 0 is the header)
    """
    values = []
    row_numbers = []
    for row_number in range(1, len(data)):
        value = to_float(get_cell(data[row_number], column_index))
        if math.isfinite(value):
            values.append(value)
            row_numbers.append(row_number)
    return values, row_numbers


def extract_numeric_values(data: Sequence[Sequence[Any]], column_index: int) -> List[float]:
    """Finite numeric values of a column; missing or text cells are skipped."""
    values, _ = extract_numeric_values_with_rows(data, column_index)
    return values


# ──────────────────────────────────────────────
#  DESCRIPTIVE STATISTICS
# ──────────────────────────────────────────────

def calculate_median(sorted_values: Sequence[float]) -> float:
    """Median of an ascending sequence (mean of the two middles for even length)."""
    n = len(sorted_values)
    middle = n // 2
    if n % 2 == 0:
        return (sorted_values[middle - 1] + sorted_values[middle]) / 2
    return sorted_values[middle]


def index_quartiles(sorted_values: Sequence[float]) -> Tuple[float, float]:
    """
    Index-based quartiles: sorted[floor(n*0.25)] and sorted[floor(n*0.75)].

    No interpolation. Exports and outlier bounds depend on this convention.
    """
    n = len(sorted_values)
    q1 = sorted_values[math.floor(n * 0.25)]
    q3 = sorted_values[math.floor(n * 0.75)]
    return float(q1), float(q3)


def summarize_values(values: Sequence[float], column_name: str = "") -> DatasetSummary:
    """
    Descriptive statistics of an already-filtered list of finite values.

    Parameters
    ----------
    values : sequence of float
    column_name : str

    Returns
    -------
    DatasetSummary
    """
    if len(values) == 0:
        return DatasetSummary(column_name=column_name)

    arr = np.asarray(values, dtype=float)
    n = len(arr)
    sorted_arr = np.sort(arr)

    mean_val = float(np.sum(arr) / n)
    deviations = arr - mean_val
    variance = float(np.sum(deviations ** 2) / n)   # population variance
    std_dev = math.sqrt(variance)

    # std_dev == 0 yields NaN here, callers format it as N/A
    with np.errstate(divide='ignore', invalid='ignore'):
        standardized = deviations / std_dev
        skewness = float(np.mean(standardized ** 3))
        kurtosis = float(np.mean(standardized ** 4)) - 3

    q1, q3 = index_quartiles(sorted_arr)

    return DatasetSummary(
        column_name=column_name,
        mean=mean_val,
        median=float(calculate_median(sorted_arr)),
        min=float(sorted_arr[0]),
        max=float(sorted_arr[-1]),
        std_dev=std_dev,
        variance=variance,
        q1=q1,
        q3=q3,
        count=n,
        skewness=skewness,
        kurtosis=kurtosis,
    )


def calculate_statistics(
    data: Sequence[Sequence[Any]],
    column_index: int,
    column_name: Optional[str] = None
) -> DatasetSummary:
    """
    Descriptive statistics for one column of a matrix.

    Cells that are missing or do not parse as finite numbers are excluded.

    Parameters
    ----------
    data : matrix
        Parsed matrix, row 0 is the header
    column_index : int
    column_name : str, optional
        Defaults to the header cell

    Returns
    -------
    DatasetSummary
    """
    if column_name is None:
        header = get_cell(data[0], column_index) if data else None
        column_name = header if header else f"Column {column_index + 1}"

    values = extract_numeric_values(data, column_index)
    summary = summarize_values(values, column_name)
    logger.debug(f"Statistics for '{column_name}': n={summary.count}")
    return summary


def summaries_to_dataframe(summaries: Dict[str, DatasetSummary]) -> pd.DataFrame:
    """
    Tabular view of several summaries (one row per key).

    Parameters
    ----------
    summaries : dict  {key: DatasetSummary}

    Returns
    -------
    pd.DataFrame
    """
    rows = []
    for key, summary in summaries.items():
        row = {'key': key}
        row.update(summary.to_dict())
        rows.append(row)

    columns = ['key'] + list(DatasetSummary.__dataclass_fields__)
    return pd.DataFrame(rows, columns=columns)


# ──────────────────────────────────────────────
#  CORRELATION
# ──────────────────────────────────────────────

def calculate_correlation(x_values: Sequence[float], y_values: Sequence[float]) -> float:
    """
    Pearson correlation coefficient.

    Returns 0 for mismatched lengths, empty input, or a zero denominator.
    """
    if len(x_values) != len(y_values) or len(x_values) == 0:
        return 0.0

    x = np.asarray(x_values, dtype=float)
    y = np.asarray(y_values, dtype=float)

    x_dev = x - x.mean()
    y_dev = y - y.mean()

    numerator = float(np.sum(x_dev * y_dev))
    denominator = math.sqrt(float(np.sum(x_dev ** 2)) * float(np.sum(y_dev ** 2)))

    if denominator == 0:
        return 0.0

    return numerator / denominator


def _pairwise_correlation(x_values: List[float], y_values: List[float], method: str) -> float:
    if method == 'pearson':
        return calculate_correlation(x_values, y_values)

    if len(x_values) != len(y_values) or len(x_values) == 0:
        return 0.0

    if method == 'spearman':
        return calculate_correlation(stats.rankdata(x_values), stats.rankdata(y_values))

    # kendall
    if len(x_values) < 2:
        return 0.0
    tau = stats.kendalltau(x_values, y_values)[0]
    return 0.0 if not np.isfinite(tau) else float(tau)


def calculate_correlation_matrix(
    data: Sequence[Sequence[Any]],
    column_indices: Sequence[int],
    method: str = 'pearson'
) -> List[List[float]]:
    """
    Symmetric correlation matrix for the given columns.

    Each column is extracted independently; columns whose numeric counts
    differ correlate as 0.

    Parameters
    ----------
    data : matrix
    column_indices : sequence of int
    method : str
        'pearson', 'spearman', or 'kendall'

    Returns
    -------
    list of list of float
    """
    if method not in CORRELATION_METHODS:
        raise ValueError(f"Unknown correlation method: {method}")

    column_values = [extract_numeric_values(data, col) for col in column_indices]
    n = len(column_indices)
    matrix = [[0.0] * n for _ in range(n)]

    for i in range(n):
        matrix[i][i] = 1.0
        for j in range(i + 1, n):
            corr = _pairwise_correlation(column_values[i], column_values[j], method)
            matrix[i][j] = corr
            matrix[j][i] = corr

    return matrix
