# tests/conftest.py
import pytest

from utils.data_loaders import create_data_file, parse_csv


@pytest.fixture
def simple_csv():
    """Three rows, two numeric columns"""
    return "a,b\n1,2\n3,4\n5,6"


@pytest.fixture
def simple_matrix(simple_csv):
    return parse_csv(simple_csv)


@pytest.fixture
def sales_matrix():
    """Mixed text and numeric columns with a ragged row and a missing cell"""
    return [
        ["region", "units", "price", "note"],
        ["North", "120", "9.5", "ok"],
        ["South", "80", "", "late"],
        ["East", "200", "11.0", "ok"],
        ["West", "abc", "10.0"],
        ["North", "50", "9.0", "ok"],
    ]


@pytest.fixture
def make_data_file():
    """Factory building a DataFile from CSV text"""
    def _make(text, name="data.csv", file_id=None):
        return create_data_file(text, name, file_id=file_id)
    return _make
