# tests/test_eda_calculations.py
import math

import pytest

from eda_utils.eda_calculations import (
    DatasetSummary,
    calculate_correlation,
    calculate_correlation_matrix,
    calculate_median,
    calculate_statistics,
    extract_numeric_values,
    extract_numeric_values_with_rows,
    index_quartiles,
    summaries_to_dataframe,
    summarize_values,
)


class TestExtraction:

    def test_skips_missing_and_text_cells(self, sales_matrix):
        assert extract_numeric_values(sales_matrix, 1) == [120.0, 80.0, 200.0, 50.0]

    def test_row_mapping(self, sales_matrix):
        values, rows = extract_numeric_values_with_rows(sales_matrix, 2)
        assert values == [9.5, 11.0, 10.0, 9.0]
        assert rows == [1, 3, 4, 5]

    def test_absent_index_is_absent_value(self, sales_matrix):
        # Row "West" has no note cell; column 3 is text anyway
        assert extract_numeric_values(sales_matrix, 3) == []
        assert extract_numeric_values(sales_matrix, 10) == []


class TestCalculateStatistics:

    def test_simple_column(self, simple_matrix):
        summary = calculate_statistics(simple_matrix, 0)

        assert summary.column_name == "a"
        assert summary.mean == pytest.approx(3.0)
        assert summary.median == pytest.approx(3.0)
        assert summary.min == 1.0
        assert summary.max == 5.0
        assert summary.std_dev == pytest.approx(math.sqrt(8 / 3))
        assert summary.variance == pytest.approx(8 / 3)
        assert summary.count == 3

    def test_index_quartiles(self):
        summary = summarize_values([4.0, 1.0, 3.0, 2.0])
        # sorted [1,2,3,4]: q1 = sorted[1], q3 = sorted[3]
        assert summary.q1 == 2.0
        assert summary.q3 == 4.0
        assert summary.quartiles == {'q1': 2.0, 'q3': 4.0}

    def test_even_count_median(self):
        assert calculate_median([1.0, 2.0, 3.0, 4.0]) == 2.5
        assert calculate_median([1.0, 2.0, 3.0]) == 2.0

    def test_index_quartiles_single_value(self):
        assert index_quartiles([7.0]) == (7.0, 7.0)

    def test_empty_column_gives_none_fields(self):
        summary = calculate_statistics([["x"], ["a"], ["b"]], 0)

        assert summary.is_empty
        assert summary.count == 0
        for field in ('mean', 'median', 'min', 'max', 'std_dev', 'variance', 'q1', 'q3', 'skewness', 'kurtosis'):
            assert getattr(summary, field) is None

    def test_constant_column(self):
        summary = summarize_values([5.0, 5.0, 5.0])

        assert summary.variance == 0.0
        assert summary.std_dev == 0.0
        assert math.isnan(summary.skewness)
        assert math.isnan(summary.kurtosis)

    def test_symmetric_data_has_zero_skew(self):
        summary = summarize_values([1.0, 2.0, 3.0, 4.0, 5.0])
        assert summary.skewness == pytest.approx(0.0, abs=1e-12)
        # Uniform-like spread is platykurtic
        assert summary.kurtosis < 0

    def test_default_name_for_blank_header(self):
        summary = calculate_statistics([["", "b"], ["1", "2"]], 0)
        assert summary.column_name == "Column 1"

    @pytest.mark.parametrize("values", [
        [3.0, -1.0, 7.5, 2.0],
        [100.0],
        [0.001, 0.002, 1000.0, -50.0, 3.0],
    ])
    def test_order_and_spread_properties(self, values):
        summary = summarize_values(values)

        assert summary.min <= summary.median <= summary.max
        assert summary.min <= summary.mean <= summary.max
        assert summary.variance >= 0
        assert summary.std_dev == pytest.approx(math.sqrt(summary.variance))

    def test_input_not_mutated(self):
        values = [3.0, 1.0, 2.0]
        summarize_values(values)
        assert values == [3.0, 1.0, 2.0]


class TestSummariesToDataframe:

    def test_one_row_per_key(self, simple_matrix):
        summaries = {
            'f-0': calculate_statistics(simple_matrix, 0),
            'f-1': calculate_statistics(simple_matrix, 1),
        }
        frame = summaries_to_dataframe(summaries)

        assert list(frame['key']) == ['f-0', 'f-1']
        assert list(frame['mean']) == pytest.approx([3.0, 4.0])
        assert 'std_dev' in frame.columns

    def test_empty(self):
        frame = summaries_to_dataframe({})
        assert frame.empty
        assert list(frame.columns)[:2] == ['key', 'column_name']

    def test_to_dict_round_trip(self):
        summary = summarize_values([1.0, 2.0])
        assert DatasetSummary(**summary.to_dict()) == summary


class TestCorrelation:

    def test_perfect_positive_and_negative(self):
        assert calculate_correlation([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
        assert calculate_correlation([1, 2, 3], [6, 4, 2]) == pytest.approx(-1.0)

    def test_degenerate_inputs_return_zero(self):
        assert calculate_correlation([], []) == 0.0
        assert calculate_correlation([1, 2], [1, 2, 3]) == 0.0
        assert calculate_correlation([1, 1, 1], [1, 2, 3]) == 0.0

    def test_matrix_is_symmetric_with_unit_diagonal(self):
        data = [["x", "y", "z"], ["1", "2", "9"], ["2", "4", "7"], ["3", "7", "8"], ["4", "8", "1"]]
        matrix = calculate_correlation_matrix(data, [0, 1, 2])

        for i in range(3):
            assert matrix[i][i] == 1.0
            for j in range(3):
                assert matrix[i][j] == pytest.approx(matrix[j][i])

    def test_spearman_on_monotonic_data(self):
        data = [["x", "y"], ["1", "1"], ["2", "4"], ["3", "9"], ["4", "100"]]
        matrix = calculate_correlation_matrix(data, [0, 1], method='spearman')
        assert matrix[0][1] == pytest.approx(1.0)

    def test_kendall_on_reversed_data(self):
        data = [["x", "y"], ["1", "4"], ["2", "3"], ["3", "2"], ["4", "1"]]
        matrix = calculate_correlation_matrix(data, [0, 1], method='kendall')
        assert matrix[0][1] == pytest.approx(-1.0)

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown correlation method"):
            calculate_correlation_matrix([["x"], ["1"]], [0], method='cosine')
