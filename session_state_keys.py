"""
Streamlit Session State Keys - Canonical Definitions
===================================================

Session state keys shared by the CSV Insight pages. Using constants keeps
the pages consistent and avoids typos in key names.

Usage:
    from session_state_keys import SESSION_DATA_FILES

    data_files = st.session_state.get(SESSION_DATA_FILES, {})
"""

# ============================================================================
# DATA MANAGEMENT
# ============================================================================

SESSION_DATA_FILES = 'data_files'
"""
Uploaded datasets (dict[str, DataFile]), keyed by file id, upload order kept.
Updated by: Data Handling page, transform actions on the Analysis page.
"""

SESSION_ACTIVE_FILE_ID = 'active_file_id'
"""
Id of the dataset shown on single-dataset views (str)
"""

SESSION_TRANSFORMATION_HISTORY = 'transformation_history'
"""
Saved dataset versions (dict[str, dict])
Format: {'entry_name': {'data_file': DataFile, 'transform': str, ...}}
Used by: utils.data_workspace
"""

# ============================================================================
# ANALYSIS RESULTS
# ============================================================================

SESSION_SELECTED_COLUMNS = 'selected_columns'
"""
Columns picked for analysis (dict[str, ColumnReference]), keyed by
ColumnReference.key ("{file_id}-{column_index}")
"""

SESSION_SUMMARIES = 'summaries'
"""
Statistics of the selected columns (dict[str, DatasetSummary]),
same keys as SESSION_SELECTED_COLUMNS
"""

SESSION_SUMMARY_CACHE = 'summary_cache'
"""
SummaryCache instance shared by all pages
"""

SESSION_UPLOAD_KEYS = 'upload_keys'
"""
(name, size) of every file taken from the uploader (set[tuple]); the
uploader keeps returning its files on each rerun, so these are skipped
"""

SESSION_OUTLIER_RESULT = 'outlier_result'
"""
Last outlier detection (dict) with keys 'reference', 'values', 'result'
"""

SESSION_COMPARISON_RESULTS = 'comparison_results'
"""
Last comparison (list[ComparisonResult])
"""

# ============================================================================
# NAVIGATION
# ============================================================================

SESSION_CURRENT_PAGE = 'current_page'
"""
Active page name (str)
"""

PAGE_HOME = 'Home'
PAGE_DATA_HANDLING = 'Data Handling'
PAGE_ANALYSIS = 'Analysis'
PAGE_COMPARISON = 'Comparison'

PAGES = [PAGE_HOME, PAGE_DATA_HANDLING, PAGE_ANALYSIS, PAGE_COMPARISON]


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def init_session_state(session_state) -> None:
    """
    Create every container key with an empty default.

    Parameters
    ----------
    session_state : st.session_state or dict
    """
    defaults = {
        SESSION_DATA_FILES: {},
        SESSION_ACTIVE_FILE_ID: None,
        SESSION_TRANSFORMATION_HISTORY: {},
        SESSION_SELECTED_COLUMNS: {},
        SESSION_SUMMARIES: {},
        SESSION_OUTLIER_RESULT: None,
        SESSION_COMPARISON_RESULTS: [],
        SESSION_UPLOAD_KEYS: set(),
        SESSION_CURRENT_PAGE: PAGE_HOME,
    }
    for key, value in defaults.items():
        if key not in session_state:
            session_state[key] = value


def get_all_session_keys() -> list:
    """
    Get list of all defined session state keys.

    Returns
    -------
    keys : list[str]
    """
    keys = []
    for name, value in globals().items():
        if name.startswith('SESSION_') and isinstance(value, str):
            keys.append(value)

    return sorted(keys)


def validate_session_state(session_state) -> dict:
    """
    Validate session state structure and report issues.

    Parameters
    ----------
    session_state : st.session_state or dict

    Returns
    -------
    report : dict
        'valid': bool, 'issues': list[str], 'warnings': list[str]
    """
    issues = []
    warnings = []

    data_files = session_state.get(SESSION_DATA_FILES) or {}
    if not data_files:
        warnings.append("No data loaded (data_files empty)")

    for key, reference in (session_state.get(SESSION_SELECTED_COLUMNS) or {}).items():
        if reference.file_id not in data_files:
            issues.append(f"Selected column '{key}' points to a removed file")

    summaries = session_state.get(SESSION_SUMMARIES) or {}
    selected = session_state.get(SESSION_SELECTED_COLUMNS) or {}
    for key in summaries:
        if key not in selected:
            warnings.append(f"Summary '{key}' has no column selection")

    return {
        'valid': len(issues) == 0,
        'issues': issues,
        'warnings': warnings
    }
