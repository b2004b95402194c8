# tests/test_session_state_keys.py
from session_state_keys import (
    PAGE_HOME,
    SESSION_COMPARISON_RESULTS,
    SESSION_CURRENT_PAGE,
    SESSION_DATA_FILES,
    SESSION_SELECTED_COLUMNS,
    SESSION_SUMMARIES,
    SESSION_SUMMARY_CACHE,
    SESSION_UPLOAD_KEYS,
    get_all_session_keys,
    init_session_state,
    validate_session_state,
)
from utils.data_loaders import ColumnReference


class TestInitSessionState:

    def test_defaults(self):
        state = {}
        init_session_state(state)

        assert state[SESSION_DATA_FILES] == {}
        assert state[SESSION_COMPARISON_RESULTS] == []
        assert state[SESSION_CURRENT_PAGE] == PAGE_HOME
        assert state[SESSION_UPLOAD_KEYS] == set()

    def test_existing_values_kept(self):
        state = {SESSION_CURRENT_PAGE: "Analysis"}
        init_session_state(state)
        assert state[SESSION_CURRENT_PAGE] == "Analysis"


class TestSessionKeys:

    def test_all_keys_sorted_and_complete(self):
        keys = get_all_session_keys()
        assert keys == sorted(keys)
        assert SESSION_SUMMARY_CACHE in keys
        assert SESSION_DATA_FILES in keys


class TestValidateSessionState:

    def test_empty_state_warns(self):
        state = {}
        init_session_state(state)

        report = validate_session_state(state)

        assert report['valid']
        assert "No data loaded (data_files empty)" in report['warnings']

    def test_dangling_selection_is_an_issue(self, make_data_file):
        data_file = make_data_file("a\n1", file_id="f1")
        state = {
            SESSION_DATA_FILES: {"f1": data_file},
            SESSION_SELECTED_COLUMNS: {
                "f1-0": ColumnReference("f1", 0, "a"),
                "gone-0": ColumnReference("gone", 0, "a"),
            },
            SESSION_SUMMARIES: {"orphan-0": object()},
        }

        report = validate_session_state(state)

        assert not report['valid']
        assert report['issues'] == ["Selected column 'gone-0' points to a removed file"]
        assert any("orphan-0" in warning for warning in report['warnings'])
