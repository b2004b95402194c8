# tests/test_summary_cache.py
import pytest

from eda_utils.summary_cache import SummaryCache
from utils.data_workspace import apply_matrix_transform


class TestSummaryCache:

    @pytest.fixture
    def data_file(self, make_data_file, simple_csv):
        return make_data_file(simple_csv, name="simple.csv", file_id="f1")

    def test_second_lookup_is_a_hit(self, data_file):
        cache = SummaryCache()
        first = cache.get_summary(data_file, 0)
        second = cache.get_summary(data_file, 0)

        assert first is second
        assert cache.hits == 1
        assert cache.misses == 1
        assert len(cache) == 1

    def test_new_version_recomputes(self, data_file):
        cache = SummaryCache()
        before = cache.get_summary(data_file, 0)

        transformed = apply_matrix_transform(
            data_file, [["a", "b"], ["10", "2"], ["30", "4"]], "Edited"
        )
        after = cache.get_summary(transformed, 0)

        assert transformed.id == data_file.id
        assert before.mean == pytest.approx(3.0)
        assert after.mean == pytest.approx(20.0)
        assert cache.misses == 2

    def test_different_matrix_same_version_recomputes(self, data_file, make_data_file):
        cache = SummaryCache()
        cache.get_summary(data_file, 0)

        impostor = make_data_file("a,b\n100,1", file_id="f1")
        summary = cache.get_summary(impostor, 0)

        assert summary.mean == pytest.approx(100.0)
        assert cache.hits == 0

    def test_invalidate(self, data_file, make_data_file):
        cache = SummaryCache()
        other = make_data_file("a\n1", file_id="f2")
        cache.get_summary(data_file, 0)
        cache.get_summary(data_file, 1)
        cache.get_summary(other, 0)

        assert cache.invalidate("f1") == 2
        assert len(cache) == 1
        assert cache.invalidate() == 1
        assert len(cache) == 0
