"""
Data Handling Page
Upload CSV files, review validation issues, remove duplicate rows
"""

import traceback

import pandas as pd
import streamlit as st

from config import get_config
from utils.data_loaders import load_uploaded_file
from utils.data_validation import remove_duplicate_rows
from workspace_utils import (
    add_file_to_workspace,
    commit_transform,
    display_workspace_summary,
    get_known_upload_keys,
    get_workspace_files,
    remove_file_from_workspace,
)


def _preview_frame(data_file, max_rows=50):
    """First rows of a DataFile as a DataFrame (ragged rows padded)"""
    headers = [h or f"Column {i + 1}" for i, h in enumerate(data_file.headers)]
    width = len(headers)
    rows = []
    for row in data_file.data[1:max_rows + 1]:
        padded = list(row[:width]) + [None] * (width - len(row))
        rows.append(padded)
    # Duplicate header names would break the frame
    unique_headers = []
    for name in headers:
        candidate = name
        suffix = 2
        while candidate in unique_headers:
            candidate = f"{name} ({suffix})"
            suffix += 1
        unique_headers.append(candidate)
    return pd.DataFrame(rows, columns=unique_headers)


def _render_upload():
    config = get_config()

    uploaded_files = st.file_uploader(
        "Choose CSV files",
        type=[ext.lstrip('.') for ext in config.upload.SUPPORTED_FILE_FORMATS],
        accept_multiple_files=True,
        key="data_handling_uploader",
    )

    if not uploaded_files:
        return

    known = get_known_upload_keys()
    for uploaded_file in uploaded_files:
        size_mb = uploaded_file.size / (1024 * 1024)
        if size_mb > config.upload.MAX_FILE_SIZE_MB:
            st.error(f"❌ {uploaded_file.name} is {size_mb:.1f} MB (limit {config.upload.MAX_FILE_SIZE_MB} MB)")
            continue
        if (uploaded_file.name, uploaded_file.size) in known:
            continue

        try:
            data_file = load_uploaded_file(uploaded_file, config.upload.ENCODINGS)
        except Exception as e:
            st.error(f"❌ **Loading failed** for {uploaded_file.name}: {str(e)}")
            st.code(traceback.format_exc())
            continue

        add_file_to_workspace(data_file)
        known.add(data_file.upload_key)

        validation = data_file.validation
        if validation is not None and not validation.is_valid:
            st.warning(f"⚠️ {data_file.name} loaded with {len(validation.errors)} structural issues")
        else:
            st.success(f"✅ {data_file.name}: {data_file.row_count} rows × {data_file.column_count} columns")


def _render_dataset(data_file):
    validation = data_file.validation

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Rows", data_file.row_count)
    col2.metric("Columns", data_file.column_count)
    col3.metric("Numeric", len(data_file.numeric_columns))
    col4.metric("Size", f"{data_file.file_size / 1024:.1f} KB")

    st.dataframe(_preview_frame(data_file), use_container_width=True)

    if validation is not None:
        if validation.is_valid and not validation.issues:
            st.success("✅ No validation issues")
        else:
            with st.expander(
                f"{'⚠️' if validation.is_valid else '❌'} Validation: "
                f"{len(validation.errors)} errors, {len(validation.warnings)} warnings",
                expanded=not validation.is_valid,
            ):
                st.dataframe(
                    pd.DataFrame(validation.issues_as_dicts()),
                    use_container_width=True,
                    hide_index=True,
                )

        if validation.has_duplicate_rows:
            fork = st.checkbox("Keep original (save as new dataset)", value=False,
                               key=f"dup_fork_{data_file.id}")
            if st.button("🧹 Remove duplicate rows", key=f"dup_remove_{data_file.id}"):
                try:
                    cleaned = remove_duplicate_rows(data_file.data)
                    new_file = commit_transform(data_file, cleaned, "Duplicates Removed", fork=fork)
                    st.success(f"✅ Removed {len(data_file.data) - len(cleaned)} duplicate rows → **{new_file.name}**")
                    st.rerun()
                except Exception as e:
                    st.error(f"❌ Could not remove duplicates: {str(e)}")
                    st.code(traceback.format_exc())

    if st.button("🗑️ Remove dataset", key=f"remove_{data_file.id}"):
        remove_file_from_workspace(data_file.id)
        st.rerun()


def show():
    """Main entry point called by homepage.py router."""
    st.title("📊 Data Handling")
    st.markdown("Upload CSV files, check them for problems and clean duplicate rows.")

    tab_upload, tab_datasets = st.tabs(["📥 Upload", "📁 Datasets"])

    with tab_upload:
        _render_upload()
        st.markdown("---")
        display_workspace_summary()

    with tab_datasets:
        files = get_workspace_files()
        if not files:
            st.info("📊 No datasets yet - upload CSV files in the Upload tab")
            return

        for data_file in list(files.values()):
            with st.expander(f"📁 {data_file.name} (v{data_file.version})", expanded=len(files) == 1):
                _render_dataset(data_file)
