# tests/test_data_workspace.py
import pytest

from utils.data_validation import remove_duplicate_rows
from utils.data_workspace import (
    apply_matrix_transform,
    derive_file_name,
    known_upload_keys,
    record_transform,
    save_original_to_history,
)


@pytest.fixture
def data_file(make_data_file, simple_csv):
    return make_data_file(simple_csv, name="sales.csv", file_id="f1")


@pytest.fixture
def new_matrix():
    return [["a", "b"], ["1", "2"], ["5", "6"]]


class TestDeriveFileName:

    def test_with_extension(self):
        assert derive_file_name("sales.csv", "Mean Imputed") == "sales_mean_imputed.csv"

    def test_without_extension(self):
        assert derive_file_name("sales", "Outliers Removed") == "sales_outliers_removed"


class TestApplyMatrixTransform:

    def test_replace_keeps_id_and_bumps_version(self, data_file, new_matrix):
        result = apply_matrix_transform(data_file, new_matrix, "Duplicates Removed")

        assert result.id == data_file.id
        assert result.name == data_file.name
        assert result.version == data_file.version + 1
        assert result.data == new_matrix
        assert result.content == "a,b\n1,2\n5,6"
        assert result.row_count == 2
        assert result.source_id is None

    def test_fork_creates_new_dataset(self, data_file, new_matrix):
        result = apply_matrix_transform(data_file, new_matrix, "Mean Imputed", fork=True)

        assert result.id != data_file.id
        assert result.name == "sales_mean_imputed.csv"
        assert result.version == 0
        assert result.source_id == data_file.id

    def test_source_left_unchanged(self, data_file, new_matrix):
        before = [list(row) for row in data_file.data]
        apply_matrix_transform(data_file, new_matrix, "Edited")

        assert data_file.data == before
        assert data_file.version == 0

    def test_matrix_is_copied(self, data_file, new_matrix):
        result = apply_matrix_transform(data_file, new_matrix, "Edited")
        new_matrix[1][0] = "999"
        assert result.data[1][0] == "1"

    def test_validation_refreshed(self, data_file):
        result = apply_matrix_transform(data_file, [["a", "b"], ["1", "2"], ["1", "2"]], "Edited")
        assert result.validation.has_duplicate_rows


class TestHistory:

    def test_original_saved_once(self, data_file, new_matrix):
        history = save_original_to_history({}, data_file)
        changed = apply_matrix_transform(data_file, new_matrix, "Edited")
        again = save_original_to_history(history, changed)

        assert list(again) == ["sales_ORIGINAL"]
        assert again["sales_ORIGINAL"]['data_file'] is data_file
        assert again["sales_ORIGINAL"]['transform_type'] == 'original'

    def test_history_not_mutated(self, data_file):
        history = {}
        save_original_to_history(history, data_file)
        assert history == {}

    def test_record_transform(self, data_file, new_matrix):
        changed = apply_matrix_transform(data_file, new_matrix, "Edited")
        history = record_transform({}, changed, "Edited", {'method': 'mean'})

        entry = history["sales_v1"]
        assert entry['transform'] == "Edited"
        assert entry['params'] == {'method': 'mean'}
        assert entry['transform_type'] == 'transform'


class TestUploadKeys:

    def test_in_place_replace_keeps_upload_key(self, make_data_file):
        original = make_data_file("a,b\n1,2\n1,2\n3,4\n", name="d.csv", file_id="f1")
        cleaned = apply_matrix_transform(original, remove_duplicate_rows(original.data), "Duplicates Removed")

        assert original.upload_key == ("d.csv", 16)
        assert cleaned.file_size != original.file_size
        assert ("d.csv", 16) in known_upload_keys({cleaned.id: cleaned})

    def test_fork_has_no_upload_key(self, data_file, new_matrix):
        forked = apply_matrix_transform(data_file, new_matrix, "Mean Imputed", fork=True)

        assert forked.upload_key is None
        assert known_upload_keys({data_file.id: data_file, forked.id: forked}) == {data_file.upload_key}

    def test_recorded_keys_survive_removal(self):
        assert known_upload_keys({}, [("gone.csv", 10)]) == {("gone.csv", 10)}
