"""
Workspace Utilities Module

Reusable utilities for working with uploaded datasets in the workspace.
Provides consistent dataset and column selection across all pages.
"""

import streamlit as st
from typing import Dict, List, Optional

from eda_utils.summary_cache import SummaryCache
from session_state_keys import (
    SESSION_ACTIVE_FILE_ID,
    SESSION_DATA_FILES,
    SESSION_SELECTED_COLUMNS,
    SESSION_SUMMARIES,
    SESSION_SUMMARY_CACHE,
    SESSION_TRANSFORMATION_HISTORY,
    SESSION_UPLOAD_KEYS,
)
from utils.data_loaders import ColumnReference, DataFile
from utils.data_workspace import (
    apply_matrix_transform,
    known_upload_keys,
    record_transform,
    save_original_to_history,
)
from utils.logging_config import get_logger

logger = get_logger("workspace")


def get_workspace_files() -> Dict[str, DataFile]:
    """
    Get all uploaded datasets.

    Returns
    -------
    dict
        {file_id: DataFile}, upload order kept
    """
    return st.session_state.get(SESSION_DATA_FILES) or {}


def get_summary_cache() -> SummaryCache:
    """Session-wide SummaryCache, created on first use"""
    if st.session_state.get(SESSION_SUMMARY_CACHE) is None:
        st.session_state[SESSION_SUMMARY_CACHE] = SummaryCache()
    return st.session_state[SESSION_SUMMARY_CACHE]


def add_file_to_workspace(data_file: DataFile) -> None:
    """Store a new DataFile and remember its original version in the history."""
    files = dict(get_workspace_files())
    files[data_file.id] = data_file
    st.session_state[SESSION_DATA_FILES] = files
    st.session_state[SESSION_ACTIVE_FILE_ID] = data_file.id
    st.session_state[SESSION_TRANSFORMATION_HISTORY] = save_original_to_history(
        st.session_state.get(SESSION_TRANSFORMATION_HISTORY), data_file
    )
    if data_file.upload_key is not None:
        st.session_state[SESSION_UPLOAD_KEYS] = set(st.session_state.get(SESSION_UPLOAD_KEYS) or ()) | {data_file.upload_key}


def get_known_upload_keys() -> set:
    """(name, size) of uploads the uploader should not import again"""
    return known_upload_keys(get_workspace_files(), st.session_state.get(SESSION_UPLOAD_KEYS) or ())


def remove_file_from_workspace(file_id: str) -> None:
    """Drop a DataFile together with its selected columns, summaries and cache entries."""
    files = dict(get_workspace_files())
    removed = files.pop(file_id, None)
    st.session_state[SESSION_DATA_FILES] = files

    selected = st.session_state.get(SESSION_SELECTED_COLUMNS) or {}
    summaries = st.session_state.get(SESSION_SUMMARIES) or {}
    st.session_state[SESSION_SELECTED_COLUMNS] = {
        key: ref for key, ref in selected.items() if ref.file_id != file_id
    }
    st.session_state[SESSION_SUMMARIES] = {
        key: summary for key, summary in summaries.items() if key in st.session_state[SESSION_SELECTED_COLUMNS]
    }
    get_summary_cache().invalidate(file_id)

    if st.session_state.get(SESSION_ACTIVE_FILE_ID) == file_id:
        st.session_state[SESSION_ACTIVE_FILE_ID] = next(iter(files), None)

    if removed is not None:
        logger.info(f"Removed {removed.name} from workspace")


def commit_transform(data_file: DataFile, new_matrix, transform_name: str, fork: bool = False,
                     params: Optional[Dict] = None) -> DataFile:
    """
    Apply a matrix transform to the workspace (replace or fork).

    Parameters
    ----------
    data_file : DataFile
        Dataset the transform was computed from
    new_matrix : list of rows
    transform_name : str
    fork : bool
        Keep the original and add the result as a new dataset
    params : dict, optional
        Transform parameters kept in the history

    Returns
    -------
    DataFile
        The dataset now stored in the workspace
    """
    result = apply_matrix_transform(data_file, new_matrix, transform_name, fork=fork)

    files = dict(get_workspace_files())
    files[result.id] = result
    st.session_state[SESSION_DATA_FILES] = files
    st.session_state[SESSION_ACTIVE_FILE_ID] = result.id
    st.session_state[SESSION_TRANSFORMATION_HISTORY] = record_transform(
        st.session_state.get(SESSION_TRANSFORMATION_HISTORY), result, transform_name, params
    )

    if not fork:
        # Column positions may have shifted; selections of this file are dropped
        get_summary_cache().invalidate(data_file.id)
        selected = st.session_state.get(SESSION_SELECTED_COLUMNS) or {}
        st.session_state[SESSION_SELECTED_COLUMNS] = {
            key: ref for key, ref in selected.items() if ref.file_id != data_file.id
        }
        summaries = st.session_state.get(SESSION_SUMMARIES) or {}
        st.session_state[SESSION_SUMMARIES] = {
            key: summary for key, summary in summaries.items() if key in st.session_state[SESSION_SELECTED_COLUMNS]
        }

    return result


def display_workspace_dataset_selector(
    label: str = "Select dataset:",
    key: str = "workspace_dataset_selector",
    help_text: Optional[str] = None,
    show_info: bool = True
) -> Optional[DataFile]:
    """
    Display a dataset selector from workspace with consistent UI.

    Parameters
    ----------
    label : str
        Label for the selectbox
    key : str
        Unique key for the selectbox widget
    help_text : str, optional
        Help text for the selectbox
    show_info : bool
        Whether to show dataset info after selection

    Returns
    -------
    DataFile or None
    """
    files = get_workspace_files()

    if len(files) == 0:
        st.warning("⚠️ **No datasets available in workspace.**")
        st.info("💡 Upload CSV files in the **Data Handling** page first")
        return None

    if help_text is None:
        help_text = "Choose a dataset from your workspace"

    file_ids = list(files.keys())
    active = st.session_state.get(SESSION_ACTIVE_FILE_ID)
    index = file_ids.index(active) if active in file_ids else 0

    selected_id = st.selectbox(
        label,
        options=file_ids,
        index=index,
        format_func=lambda file_id: files[file_id].name,
        key=key,
        help=help_text
    )

    if selected_id is None:
        return None

    data_file = files[selected_id]
    if show_info:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Rows", data_file.row_count)
        with col2:
            st.metric("Columns", data_file.column_count)
        with col3:
            st.metric("Numeric", len(data_file.numeric_columns))

    return data_file


def display_column_selector(
    files: Dict[str, DataFile],
    label: str = "Select numeric columns:",
    key: str = "workspace_column_selector",
) -> List[ColumnReference]:
    """
    Multiselect over the numeric columns of every uploaded file.

    Returns
    -------
    list of ColumnReference
    """
    options: Dict[str, ColumnReference] = {}
    for data_file in files.values():
        for reference in data_file.column_references():
            options[reference.key] = reference

    if not options:
        st.info("No numeric columns found in the uploaded files.")
        return []

    previous = st.session_state.get(SESSION_SELECTED_COLUMNS) or {}
    default = [column_key for column_key in previous if column_key in options]

    chosen = st.multiselect(
        label,
        options=list(options.keys()),
        default=default,
        format_func=lambda column_key: f"{options[column_key].file_name} - {options[column_key].column_name}",
        key=key,
    )
    return [options[column_key] for column_key in chosen]


def display_workspace_summary():
    """
    Display a summary of all datasets in the workspace.
    Useful for sidebar or workspace overview sections.
    """
    files = get_workspace_files()

    if len(files) == 0:
        st.info("📊 Workspace is empty - upload data to get started")
        return

    st.markdown(f"### 📊 Workspace ({len(files)} datasets)")

    history = st.session_state.get(SESSION_TRANSFORMATION_HISTORY) or {}
    for data_file in files.values():
        with st.expander(f"📁 {data_file.name}", expanded=False):
            st.write(f"**Shape**: {data_file.row_count} rows × {data_file.column_count} columns")
            st.write(f"**Numeric columns**: {len(data_file.numeric_columns)}")
            if data_file.version:
                st.caption(f"📝 Version {data_file.version}")
            if data_file.source_id:
                source = files.get(data_file.source_id)
                st.caption(f"🔀 Derived from {source.name if source else data_file.source_id}")

            transforms = [
                entry['transform'] for entry in history.values()
                if entry['data_file'].id == data_file.id and entry['transform_type'] == 'transform'
            ]
            if transforms:
                st.caption("🕐 " + " → ".join(transforms))
