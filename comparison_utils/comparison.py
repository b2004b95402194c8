"""
Dataset Comparison
Aligns same-named columns across uploaded files and compares their statistics
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from eda_utils.eda_calculations import DatasetSummary, calculate_statistics
from utils.logging_config import get_logger

logger = get_logger("comparison")

DIFFERENCE_FIELDS = ('mean', 'median', 'std_dev', 'min', 'max', 'variance')


@dataclass
class ComparisonInput:
    """One file's contribution to a comparison"""
    id: str
    name: str
    data: List[List[Any]]
    column_indices: List[int]
    headers: Optional[List[str]] = None

    def header_row(self) -> List[str]:
        if self.headers is not None:
            return list(self.headers)
        return list(self.data[0]) if self.data else []


@dataclass
class DatasetComparisonEntry:
    dataset_id: str
    dataset_name: str
    column_index: int
    stats: DatasetSummary


@dataclass
class Difference:
    """First dataset minus second dataset, per statistic"""
    dataset1: str
    dataset2: str
    mean: float = 0.0
    median: float = 0.0
    std_dev: float = 0.0
    min: float = 0.0
    max: float = 0.0
    variance: float = 0.0


@dataclass
class ComparisonResult:
    column_name: str
    datasets: List[DatasetComparisonEntry] = field(default_factory=list)
    differences: List[Difference] = field(default_factory=list)


def _as_input(dataset: Union[ComparisonInput, Mapping[str, Any]]) -> ComparisonInput:
    if isinstance(dataset, ComparisonInput):
        return dataset
    return ComparisonInput(
        id=dataset['id'],
        name=dataset['name'],
        data=dataset['data'] if 'data' in dataset else dataset['matrix'],
        column_indices=list(dataset.get('column_indices', dataset.get('columnIndices', []))),
        headers=dataset.get('headers'),
    )


def build_column_name_index(
    datasets: Sequence[Union[ComparisonInput, Mapping[str, Any]]]
) -> Dict[str, List[Tuple[str, int]]]:
    """
    Join index: column name -> [(dataset_id, column_index), ...]

    Names come from each dataset's selected columns; the index is resolved
    again by exact header lookup, and each file appears at most once per name.
    Insertion order follows first appearance.
    """
    index: Dict[str, List[Tuple[str, int]]] = {}

    for dataset in map(_as_input, datasets):
        headers = dataset.header_row()
        for column_index in dataset.column_indices:
            if not 0 <= column_index < len(headers):
                continue
            name = headers[column_index]
            resolved = headers.index(name)

            entries = index.setdefault(name, [])
            if any(dataset_id == dataset.id for dataset_id, _ in entries):
                continue
            entries.append((dataset.id, resolved))

    return index


def _difference(first: DatasetSummary, second: DatasetSummary, name1: str, name2: str) -> Difference:
    values = {}
    for stat in DIFFERENCE_FIELDS:
        a = getattr(first, stat)
        b = getattr(second, stat)
        values[stat] = 0.0 if a is None or b is None else a - b
    return Difference(dataset1=name1, dataset2=name2, **values)


def compare_datasets(
    datasets: Sequence[Union[ComparisonInput, Mapping[str, Any]]]
) -> List[ComparisonResult]:
    """
    Compare statistics of columns shared by name across files

    Parameters
    ----------
    datasets : sequence
        ComparisonInput objects or mappings with keys
        'id', 'name', 'data', 'column_indices' (optional 'headers')

    Returns
    -------
    list of ComparisonResult
        One per column name found in at least two files. With exactly two
        files the result carries one Difference (first - second, None -> 0).
    """
    inputs = [_as_input(dataset) for dataset in datasets]
    if not inputs:
        return []

    by_id = {dataset.id: dataset for dataset in inputs}
    name_index = build_column_name_index(inputs)

    results = []
    for column_name, entries in name_index.items():
        if len(entries) < 2:
            logger.debug(f"Column '{column_name}' appears in one file only; excluded")
            continue

        result = ComparisonResult(column_name=column_name)
        for dataset_id, column_index in entries:
            dataset = by_id[dataset_id]
            result.datasets.append(DatasetComparisonEntry(
                dataset_id=dataset.id,
                dataset_name=dataset.name,
                column_index=column_index,
                stats=calculate_statistics(dataset.data, column_index, column_name),
            ))

        if len(result.datasets) == 2:
            first, second = result.datasets
            result.differences.append(
                _difference(first.stats, second.stats, first.dataset_name, second.dataset_name)
            )

        results.append(result)

    logger.info(f"Compared {len(inputs)} datasets: {len(results)} shared columns")
    return results


def _display(value: Optional[float], decimals: int = 2) -> str:
    if value is None or value != value:
        return 'N/A'
    return f"{value:.{decimals}f}"


def _signed(value: float, decimals: int = 2) -> str:
    text = f"{value:.{decimals}f}"
    return f"+{text}" if value > 0 else text


def generate_comparison_table_data(results: Sequence[ComparisonResult], decimals: int = 2) -> List[Dict[str, str]]:
    """
    Flatten comparison results into table rows

    Keys: 'columnName', '<dataset> (Mean|Median|StdDev|Min|Max)', and
    'diff-mean', 'diff-median', 'diff-stdDev', 'diff-min', 'diff-max',
    'diff-variance' when a difference is available.
    """
    rows = []
    for result in results:
        row = {'columnName': result.column_name}
        for entry in result.datasets:
            stats = entry.stats
            row[f"{entry.dataset_name} (Mean)"] = _display(stats.mean, decimals)
            row[f"{entry.dataset_name} (Median)"] = _display(stats.median, decimals)
            row[f"{entry.dataset_name} (StdDev)"] = _display(stats.std_dev, decimals)
            row[f"{entry.dataset_name} (Min)"] = _display(stats.min, decimals)
            row[f"{entry.dataset_name} (Max)"] = _display(stats.max, decimals)

        if result.differences:
            diff = result.differences[0]
            row['diff-mean'] = _signed(diff.mean, decimals)
            row['diff-median'] = _signed(diff.median, decimals)
            row['diff-stdDev'] = _signed(diff.std_dev, decimals)
            row['diff-min'] = _signed(diff.min, decimals)
            row['diff-max'] = _signed(diff.max, decimals)
            row['diff-variance'] = _signed(diff.variance, decimals)

        rows.append(row)
    return rows


def comparison_inputs_from_selection(data_files: Mapping[str, Any], selected_columns: Sequence[Any]) -> List[ComparisonInput]:
    """
    Group selected ColumnReferences by file into ComparisonInputs

    Files with no selected column are left out; file order follows data_files.
    """
    indices_by_file: Dict[str, List[int]] = {}
    for reference in selected_columns:
        indices_by_file.setdefault(reference.file_id, []).append(reference.column_index)

    inputs = []
    for file_id, data_file in data_files.items():
        if indices_by_file.get(file_id):
            inputs.append(ComparisonInput(
                id=data_file.id,
                name=data_file.name,
                data=data_file.data,
                column_indices=indices_by_file[file_id],
                headers=list(data_file.headers),
            ))
    return inputs
