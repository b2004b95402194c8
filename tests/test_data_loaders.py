# tests/test_data_loaders.py
import math

import pytest

from utils.data_loaders import (
    ColumnReference,
    DataFile,
    create_data_file,
    decode_uploaded_bytes,
    get_cell,
    get_numeric_columns,
    is_numeric,
    load_uploaded_file,
    parse_csv,
    serialize_csv,
    to_float,
)


class TestParseCsv:

    def test_simple_input(self, simple_csv):
        """Header plus data rows, cells kept as strings"""
        assert parse_csv(simple_csv) == [["a", "b"], ["1", "2"], ["3", "4"], ["5", "6"]]

    def test_empty_and_whitespace_input(self):
        assert parse_csv("") == []
        assert parse_csv("   \n  ") == []
        assert parse_csv(None) == []

    def test_quoted_field_keeps_comma(self):
        data = parse_csv('name,score\n"Smith, J",5')
        assert data[1] == ["Smith, J", "5"]

    def test_fields_are_trimmed(self):
        data = parse_csv("a , b\n 1 ,  2 ")
        assert data == [["a", "b"], ["1", "2"]]

    def test_backslash_escaped_quote_does_not_toggle(self):
        data = parse_csv('a\n"x\\"y"')
        assert data[1] == ['x\\"y']

    def test_ragged_rows_are_kept(self):
        data = parse_csv("a,b,c\n1,2\n3,4,5,6")
        assert [len(row) for row in data] == [3, 2, 4]

    def test_round_trip_on_simple_csv(self, simple_csv):
        parsed = parse_csv(simple_csv)
        assert parse_csv(serialize_csv(parsed)) == parsed


class TestSerializeCsv:

    def test_quotes_fields_with_commas(self):
        assert serialize_csv([["a", "b"], ["x,y", 1.5]]) == 'a,b\n"x,y",1.5'

    def test_none_becomes_empty(self):
        assert serialize_csv([["a", "b"], ["1", None]]) == "a,b\n1,"


class TestCellParsing:

    def test_get_cell_out_of_range(self):
        assert get_cell(["1", "2"], 5) is None
        assert get_cell(["1", "2"], -1) is None
        assert get_cell(["1", "2"], 1) == "2"

    @pytest.mark.parametrize("text,expected", [
        ("42", 42.0),
        ("-3.5", -3.5),
        (" 7 ", 7.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("+2.", 2.0),
    ])
    def test_to_float_valid(self, text, expected):
        assert to_float(text) == expected

    @pytest.mark.parametrize("text", ["abc", "12abc", "", "1_000", "inf", "nan", "1,5"])
    def test_to_float_invalid(self, text):
        assert math.isnan(to_float(text))

    def test_to_float_passes_numbers_through(self):
        assert to_float(3) == 3.0
        assert to_float(2.5) == 2.5
        assert math.isnan(to_float(None))
        assert math.isnan(to_float(True))

    def test_is_numeric(self):
        assert is_numeric("3.2")
        assert is_numeric(4.0)
        assert not is_numeric("")
        assert not is_numeric("  ")
        assert not is_numeric(None)
        assert not is_numeric(float("nan"))


class TestGetNumericColumns:

    def test_all_numeric(self, simple_matrix):
        assert get_numeric_columns(simple_matrix) == [
            {'index': 0, 'name': 'a'},
            {'index': 1, 'name': 'b'},
        ]

    def test_one_bad_cell_disqualifies_column(self, sales_matrix):
        columns = get_numeric_columns(sales_matrix)
        # units has "abc", price has "", note is text
        assert columns == []

    def test_short_row_disqualifies_column(self):
        data = [["a", "b"], ["1", "2"], ["3"]]
        assert get_numeric_columns(data) == [{'index': 0, 'name': 'a'}]

    def test_blank_header_gets_positional_name(self):
        data = [["a", ""], ["1", "2"]]
        assert get_numeric_columns(data)[1] == {'index': 1, 'name': 'Column 2'}

    def test_header_only(self):
        assert get_numeric_columns([["a", "b"]]) == []


class TestDecodeUploadedBytes:

    def test_utf8_with_bom(self):
        assert decode_uploaded_bytes("a,b".encode("utf-8-sig")) == "a,b"

    def test_falls_back_to_latin1(self):
        assert decode_uploaded_bytes("café".encode("latin-1")) == "café"

    def test_raises_when_nothing_decodes(self):
        with pytest.raises(ValueError, match="Unable to decode"):
            decode_uploaded_bytes(b"\xff\xfe\xfa", encodings=("utf-8",))


class TestDataFile:

    def test_create_data_file(self, simple_csv):
        data_file = create_data_file(simple_csv, "simple.csv", file_id="file-1")

        assert isinstance(data_file, DataFile)
        assert data_file.id == "file-1"
        assert data_file.headers == ["a", "b"]
        assert data_file.row_count == 3
        assert data_file.column_count == 2
        assert data_file.version == 0
        assert data_file.file_size == len(simple_csv.encode("utf-8"))
        assert data_file.validation.is_valid

    def test_generated_ids_are_unique(self, simple_csv):
        first = create_data_file(simple_csv, "a.csv")
        second = create_data_file(simple_csv, "a.csv")
        assert first.id != second.id
        assert first.id.startswith("file-")

    def test_numeric_columns_are_cached(self, make_data_file, simple_csv):
        data_file = make_data_file(simple_csv)
        assert data_file.numeric_columns is data_file.numeric_columns

    def test_column_references(self, make_data_file, simple_csv):
        data_file = make_data_file(simple_csv, name="simple.csv", file_id="f1")
        references = data_file.column_references()

        assert references == [
            ColumnReference("f1", 0, "a", "simple.csv"),
            ColumnReference("f1", 1, "b", "simple.csv"),
        ]
        assert references[1].key == "f1-1"

    def test_to_record(self, make_data_file):
        data_file = make_data_file("a,b\n1,\n2,3", name="sales.csv")
        record = data_file.to_record()

        assert record['name'] == "sales"
        assert record['original_name'] == "sales.csv"
        assert record['row_count'] == 2
        assert record['is_valid'] is True
        assert record['validation_issues'][0]['type'] == 'warning'
        assert record['validation_issues'][0]['rowIndex'] == 1

    def test_load_uploaded_file(self, tmp_path):
        path = tmp_path / "upload.csv"
        path.write_bytes("x,y\n1,2\n".encode("utf-8"))

        with open(path, "rb") as handle:
            data_file = load_uploaded_file(handle)

        assert data_file.name.endswith("upload.csv")
        assert data_file.data == [["x", "y"], ["1", "2"]]
        assert data_file.file_size == path.stat().st_size
