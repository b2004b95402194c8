"""
Chart Data Preparation
Turns matrix rows into bar, pie, histogram, scatter and treemap structures

Shared rules for the category charts:
  1. read data rows 1..limit (the row window)
  2. drop pairs whose value is not a finite number
  3. sort descending by value (stable)
  4. keep the first occurrence of each label
  5. cap at limit
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from color_utils import BAR_COLORS, PIE_COLORS, PRIMARY_BORDER, PRIMARY_COLOR, palette_slice
from utils.data_loaders import get_cell, is_numeric, to_float
from utils.logging_config import get_logger

logger = get_logger("chart_data")

OTHERS_LABEL = 'Others'
OTHERS_SHARE = 0.01


@dataclass
class ChartDataset:
    """One series aligned index-wise to the chart labels"""
    label: str
    data: List[Any] = field(default_factory=list)
    background_color: Any = None
    border_color: Any = None
    border_width: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'label': self.label, 'data': list(self.data)}
        if self.background_color is not None:
            result['backgroundColor'] = self.background_color
        if self.border_color is not None:
            result['borderColor'] = self.border_color
        if self.border_width is not None:
            result['borderWidth'] = self.border_width
        return result


@dataclass
class ChartData:
    """Labels plus one or more aligned datasets"""
    labels: List[str] = field(default_factory=list)
    datasets: List[ChartDataset] = field(default_factory=list)

    @property
    def values(self) -> List[Any]:
        """Data of the first dataset"""
        return self.datasets[0].data if self.datasets else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            'labels': list(self.labels),
            'datasets': [dataset.to_dict() for dataset in self.datasets],
        }


@dataclass
class ScatterData:
    """Point datasets; each point is {'x': float, 'y': float}"""
    datasets: List[ChartDataset] = field(default_factory=list)

    @property
    def points(self) -> List[Dict[str, float]]:
        return self.datasets[0].data if self.datasets else []

    def to_dict(self) -> Dict[str, Any]:
        return {'datasets': [dataset.to_dict() for dataset in self.datasets]}


@dataclass
class TreeMapNode:
    name: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'value': self.value}


def _label_text(value: Any) -> str:
    return '' if value is None else str(value)


def _ranked_pairs(
    data: Sequence[Sequence[Any]],
    label_getter,
    value_column_index: int,
    limit: int
) -> List[Dict[str, Any]]:
    """Row window, finite filter, descending sort, first-label dedup, cap."""
    extracted = []
    for row in data[1:limit + 1]:
        value = to_float(get_cell(row, value_column_index))
        if math.isfinite(value):
            extracted.append({'label': label_getter(row), 'value': value})

    extracted.sort(key=lambda item: item['value'], reverse=True)

    seen = set()
    unique = []
    for item in extracted:
        if item['label'] not in seen:
            seen.add(item['label'])
            unique.append(item)

    return unique[:limit]


def prepare_bar_chart_data(
    data: Sequence[Sequence[Any]],
    label_column_index: int,
    value_column_index: int,
    limit: int = 10
) -> ChartData:
    """
    Bar chart: highest values first, one bar per label

    Parameters:
    -----------
    data : matrix
    label_column_index : int
    value_column_index : int
    limit : int, default 10

    Returns:
    --------
    ChartData : one dataset named 'Value'
    """
    pairs = _ranked_pairs(
        data, lambda row: _label_text(get_cell(row, label_column_index)), value_column_index, limit
    )

    labels = [item['label'] for item in pairs]
    values = [item['value'] for item in pairs]
    colors = palette_slice(BAR_COLORS, len(values))

    return ChartData(
        labels=labels,
        datasets=[ChartDataset(
            label='Value',
            data=values,
            background_color=colors,
            border_color=list(colors),
            border_width=1,
        )],
    )


def prepare_pie_chart_data(
    data: Sequence[Sequence[Any]],
    label_column_index: int,
    value_column_index: int,
    limit: int = 8,
    others_share: float = OTHERS_SHARE
) -> ChartData:
    """
    Pie chart: like the bar chart, with slices under others_share (1%) of
    the total merged into 'Others'

    The 'Others' slice is appended last and omitted when its sum is zero.
    Slice values always sum to the bar-chart total for the same inputs.
    """
    pairs = _ranked_pairs(
        data, lambda row: _label_text(get_cell(row, label_column_index)), value_column_index, limit
    )

    total = sum(item['value'] for item in pairs)

    if total == 0:
        significant = list(pairs)
    else:
        significant = [item for item in pairs if item['value'] / total >= others_share]
        other_sum = sum(item['value'] for item in pairs if item['value'] / total < others_share)
        if other_sum != 0:
            significant.append({'label': OTHERS_LABEL, 'value': other_sum})

    labels = [item['label'] for item in significant]
    values = [item['value'] for item in significant]

    return ChartData(
        labels=labels,
        datasets=[ChartDataset(
            label='Value',
            data=values,
            background_color=palette_slice(PIE_COLORS, len(values)),
        )],
    )


def prepare_histogram_data(
    data: Sequence[Sequence[Any]],
    column_index: int,
    bins: int = 10
) -> ChartData:
    """
    Histogram with equal-width bins between the column min and max

    The maximum value always falls in the last bin. Counts sum to the
    number of finite values in the column.

    Raises:
    -------
    ValueError : if bins < 1
    """
    if bins < 1:
        raise ValueError(f"Histogram needs at least one bin, got {bins}")

    values = []
    for row in data[1:]:
        value = to_float(get_cell(row, column_index))
        if math.isfinite(value):
            values.append(value)

    if not values:
        return ChartData(labels=[], datasets=[ChartDataset(label='Frequency', data=[])])

    min_val = min(values)
    max_val = max(values)
    bin_width = (max_val - min_val) / bins

    labels = []
    for i in range(bins):
        lower = min_val + i * bin_width
        upper = min_val + (i + 1) * bin_width
        labels.append(f"{lower:.2f} - {upper:.2f}")

    counts = [0] * bins
    for value in values:
        if value == max_val:
            counts[bins - 1] += 1
        else:
            bin_index = math.floor((value - min_val) / bin_width)
            counts[min(max(bin_index, 0), bins - 1)] += 1

    return ChartData(
        labels=labels,
        datasets=[ChartDataset(
            label='Frequency',
            data=counts,
            background_color=PRIMARY_COLOR,
            border_color=PRIMARY_BORDER,
            border_width=1,
        )],
    )


def prepare_scatter_plot_data(
    data: Sequence[Sequence[Any]],
    x_column_index: int,
    y_column_index: int,
    limit: int = 100
) -> ScatterData:
    """
    Scatter points from two columns of the same file

    Rows 1..limit are read, non-numeric pairs dropped, exact duplicate
    points removed (first kept), and the result capped at limit.
    """
    seen = set()
    points = []
    for row in data[1:limit + 1]:
        x = to_float(get_cell(row, x_column_index))
        y = to_float(get_cell(row, y_column_index))
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        if (x, y) in seen:
            continue
        seen.add((x, y))
        points.append({'x': x, 'y': y})

    return ScatterData(datasets=[ChartDataset(
        label='Data Points',
        data=points[:limit],
        background_color=[PRIMARY_COLOR],
        border_color=PRIMARY_BORDER,
    )])


def prepare_scatter_for_references(data_files, x_reference, y_reference, limit: int = 100) -> Optional[ScatterData]:
    """
    Scatter data for two ColumnReferences

    Both columns must come from the same file; otherwise nothing is
    plotted and None is returned.

    Parameters:
    -----------
    data_files : dict  {file_id: DataFile}
    x_reference, y_reference : ColumnReference
    """
    if x_reference.file_id != y_reference.file_id:
        logger.warning(
            f"Scatter refused: X column from {x_reference.file_id}, Y column from {y_reference.file_id}"
        )
        return None

    data_file = data_files.get(x_reference.file_id)
    if data_file is None:
        logger.warning(f"Scatter refused: unknown file {x_reference.file_id}")
        return None

    return prepare_scatter_plot_data(data_file.data, x_reference.column_index, y_reference.column_index, limit)


def prepare_tree_map_data(
    data: Sequence[Sequence[Any]],
    value_column_index: int,
    limit: int = 10
) -> List[TreeMapNode]:
    """
    Treemap nodes named after the first column of each row

    Node names are 'Category {first cell}' regardless of the chosen value
    column; sorted descending, deduplicated by name, capped at limit.
    """
    pairs = _ranked_pairs(
        data, lambda row: f"Category {_label_text(get_cell(row, 0))}", value_column_index, limit
    )
    return [TreeMapNode(name=item['label'], value=item['value']) for item in pairs]


def find_label_column(data: Sequence[Sequence[Any]], headers: Optional[Sequence[str]] = None) -> int:
    """
    Index of the first column that is not entirely numeric (0 if none)

    Used to pick the category column for bar and pie charts.
    """
    if not data:
        return 0
    if headers is None:
        headers = data[0]

    for col_index in range(len(headers)):
        if not all(is_numeric(get_cell(row, col_index)) for row in data[1:]):
            return col_index
    return 0
