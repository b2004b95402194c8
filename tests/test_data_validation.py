# tests/test_data_validation.py
from utils.data_validation import remove_duplicate_rows, validate_csv_data


class TestValidateCsvData:

    def test_clean_file(self, simple_matrix):
        validation = validate_csv_data(simple_matrix)

        assert validation.is_valid
        assert validation.issues == []
        assert not validation.has_duplicate_rows
        assert not validation.has_missing_values
        assert not validation.has_inconsistent_columns

    def test_empty_file(self):
        validation = validate_csv_data([])

        assert not validation.is_valid
        assert validation.errors[0].message == "File is empty or could not be parsed"

    def test_blank_headers(self):
        validation = validate_csv_data([["", " "], ["1", "2"]])
        assert any(issue.message == "No column headers found" for issue in validation.errors)

    def test_inconsistent_row_is_error(self, sales_matrix):
        validation = validate_csv_data(sales_matrix)

        assert not validation.is_valid
        assert validation.has_inconsistent_columns
        messages = [issue.message for issue in validation.errors]
        assert "Row 5 has 3 columns, expected 4" in messages

    def test_missing_value_is_warning(self, sales_matrix):
        validation = validate_csv_data(sales_matrix)

        assert validation.has_missing_values
        missing = [w for w in validation.warnings if w.message.startswith("Missing value")]
        assert len(missing) == 1
        assert missing[0].message == "Missing value at row 3, column 3 (price)"
        assert (missing[0].row_index, missing[0].col_index) == (2, 2)

    def test_missing_value_in_unnamed_column(self):
        validation = validate_csv_data([["a"], ["1", ""]])
        assert "Missing value at row 2, column 2 (unnamed)" in [w.message for w in validation.warnings]

    def test_duplicates_reported_once(self):
        data = [["a", "b"], ["1", "2"], ["1", "2"], ["1", "2"], ["3", "4"]]
        validation = validate_csv_data(data)

        assert validation.is_valid
        assert validation.has_duplicate_rows
        duplicates = [w for w in validation.warnings if "duplicate" in w.message]
        assert [w.message for w in duplicates] == ["Found 2 duplicate rows. Consider removing them."]

    def test_issue_dicts(self):
        validation = validate_csv_data([["a", "b"], ["1"]])
        assert validation.issues_as_dicts() == [{
            'type': 'error',
            'message': "Row 2 has 1 columns, expected 2",
            'rowIndex': 1,
            'colIndex': None,
        }]


class TestRemoveDuplicateRows:

    def test_keeps_header_and_first_occurrences(self):
        data = [["a", "b"], ["1", "2"], ["3", "4"], ["1", "2"]]
        assert remove_duplicate_rows(data) == [["a", "b"], ["1", "2"], ["3", "4"]]

    def test_does_not_mutate_input(self):
        data = [["a"], ["1"], ["1"]]
        remove_duplicate_rows(data)
        assert data == [["a"], ["1"], ["1"]]

    def test_header_only(self):
        assert remove_duplicate_rows([["a"]]) == [["a"]]
