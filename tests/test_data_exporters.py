# tests/test_data_exporters.py
import math

import pandas as pd
import pytest

from comparison_utils.comparison import ComparisonInput, compare_datasets
from eda_utils.eda_calculations import calculate_statistics
from eda_utils.outliers import OutlierResult
from utils.data_exporters import (
    STATISTICS_HEADER,
    export_statistics_to_excel,
    format_comparison_for_export,
    format_correlation_for_export,
    format_export_number,
    format_outliers_for_export,
    format_statistics_for_export,
    quote_text,
    statistics_to_dataframe,
)
from utils.data_loaders import ColumnReference


@pytest.fixture
def statistics_inputs(simple_matrix):
    summaries = {"f1-0": calculate_statistics(simple_matrix, 0)}
    selected = {"f1-0": ColumnReference("f1", 0, "a", "f.csv")}
    return summaries, selected


class TestFormatExportNumber:

    @pytest.mark.parametrize("value,expected", [
        (5e-05, "5.0000e-5"),
        (0, "0.0000e+0"),
        (0.0, "0.0000e+0"),
        (-1.234e-05, "-1.2340e-5"),
        (3.0, "3"),
        (42, "42"),
        (1.5, "1.5"),
        (0.25, "0.25"),
        (None, "N/A"),
        (float('nan'), "N/A"),
        (float('inf'), "N/A"),
        (-0.0, "0.0000e+0"),
        (1e21, "1e+21"),
        (-2.5e22, "-2.5e+22"),
        (123456789012345678.0, "123456789012345680"),
    ])
    def test_cases(self, value, expected):
        assert format_export_number(value) == expected

    def test_custom_threshold(self):
        assert format_export_number(0.005, threshold=0.01, digits=2) == "5.00e-3"


class TestQuoteText:

    def test_embedded_quotes_doubled(self):
        assert quote_text('say "hi"') == '"say ""hi"""'
        assert quote_text(None) == '""'


class TestStatisticsExport:

    def test_header_and_row(self, statistics_inputs):
        summaries, selected = statistics_inputs
        summary = summaries["f1-0"]

        text = format_statistics_for_export(summaries, selected)
        lines = text.splitlines()

        assert lines[0] == ','.join(STATISTICS_HEADER)
        assert lines[1] == ','.join([
            '"a"', '"f.csv"', "3", "3", "1", "5",
            repr(summary.std_dev), repr(summary.variance), "3",
        ])
        assert text.endswith("\n")
        assert summary.std_dev == pytest.approx(math.sqrt(8 / 3))

    def test_unselected_keys_skipped(self, statistics_inputs):
        summaries, _ = statistics_inputs
        text = format_statistics_for_export(summaries, {})
        assert text.splitlines() == [','.join(STATISTICS_HEADER)]

    def test_empty_column_written_as_na(self):
        summaries = {"f1-0": calculate_statistics([["x"], ["a"]], 0)}
        selected = {"f1-0": ColumnReference("f1", 0, "x", "f.csv")}

        row = format_statistics_for_export(summaries, selected).splitlines()[1]
        assert row == '"x","f.csv",N/A,N/A,N/A,N/A,N/A,N/A,0'


class TestComparisonExport:

    @pytest.fixture
    def results(self):
        return compare_datasets([
            ComparisonInput(id="f1", name="jan.csv", data=[["sales"], ["40"], ["60"]], column_indices=[0]),
            ComparisonInput(id="f2", name="feb.csv", data=[["sales"], ["50"], ["70"]], column_indices=[0]),
        ])

    def test_two_datasets_include_differences(self, results):
        lines = format_comparison_for_export(results).splitlines()

        header = lines[0].split(',')
        assert header[0] == "Column Name"
        assert "jan.csv (Mean)" in header
        assert "Difference (Mean)" in header
        assert "Difference (Variance)" not in header
        assert len(header) == 1 + 5 + 5 + 5

        row = lines[1].split(',')
        assert row[0] == '"sales"'
        assert row[1] == "50"
        assert row[11] == "-10"

    def test_three_datasets_have_no_difference_columns(self, results):
        more = compare_datasets([
            ComparisonInput(id="f1", name="a.csv", data=[["v"], ["1"]], column_indices=[0]),
            ComparisonInput(id="f2", name="b.csv", data=[["v"], ["2"]], column_indices=[0]),
            ComparisonInput(id="f3", name="c.csv", data=[["v"], ["3"]], column_indices=[0]),
        ])
        header = format_comparison_for_export(more).splitlines()[0]
        assert "Difference" not in header


class TestOutlierExport:

    def test_indices_are_one_based(self):
        result = OutlierResult(outliers=[10.0, 200.0], outlier_indices=[0, 5])
        assert format_outliers_for_export(result) == "Index,Value\n1,10\n6,200\n"

    def test_no_outliers(self):
        assert format_outliers_for_export(OutlierResult()) == "Index,Value\n"


class TestCorrelationExport:

    def test_header_rows_and_decimals(self):
        matrix = [[1.0, 0.123456], [0.123456, 1.0]]
        text = format_correlation_for_export(matrix, ["x", "y"])

        assert text == "Column,x,y\nx,1.0000,0.1235\ny,0.1235,1.0000\n"

    def test_nan_cells_left_empty(self):
        matrix = [[1.0, float('nan')], [float('nan'), 1.0]]
        lines = format_correlation_for_export(matrix, ["x", "flat"]).splitlines()
        assert lines[1] == "x,1.0000,"
        assert lines[2] == "flat,,1.0000"

    def test_names_with_commas_quoted(self):
        header = format_correlation_for_export([[1.0]], ["price, usd"]).splitlines()[0]
        assert header == 'Column,"price, usd"'


class TestExcelExport:

    def test_statistics_sheet(self, statistics_inputs):
        summaries, selected = statistics_inputs

        output = export_statistics_to_excel(summaries, selected)
        frame = pd.read_excel(output, sheet_name='Statistics')

        assert list(frame.columns) == list(statistics_to_dataframe(summaries, selected).columns)
        assert frame.loc[0, 'Column Name'] == "a"
        assert frame.loc[0, 'Mean'] == pytest.approx(3.0)

    def test_comparison_sheet(self, statistics_inputs):
        summaries, selected = statistics_inputs
        results = compare_datasets([
            ComparisonInput(id="f1", name="a.csv", data=[["v"], ["1"]], column_indices=[0]),
            ComparisonInput(id="f2", name="b.csv", data=[["v"], ["2"]], column_indices=[0]),
        ])

        output = export_statistics_to_excel(summaries, selected, comparison_results=results)
        sheets = pd.read_excel(output, sheet_name=None)

        assert set(sheets) == {'Statistics', 'Comparison'}
        assert list(sheets['Comparison']['Dataset']) == ["a.csv", "b.csv"]
