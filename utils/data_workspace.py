"""
Workspace management functions
Handles DataFile transforms (replace or fork) and transformation history
"""

from dataclasses import replace
from datetime import datetime

from .data_loaders import generate_file_id, serialize_csv
from .data_validation import validate_csv_data
from .logging_config import get_logger

logger = get_logger("data_workspace")


def derive_file_name(name, transform_name):
    """
    Name for a forked dataset: 'sales.csv' + 'Mean Imputed' -> 'sales_mean_imputed.csv'
    """
    suffix = transform_name.strip().lower().replace(' ', '_')
    if '.' in name:
        stem, extension = name.rsplit('.', 1)
        return f"{stem}_{suffix}.{extension}"
    return f"{name}_{suffix}"


def apply_matrix_transform(data_file, new_matrix, transform_name, fork=False):
    """
    Wrap a transformed matrix in a new DataFile

    Parameters:
    -----------
    data_file : DataFile
        Source dataset (left unchanged)
    new_matrix : list of rows
        Result of a transform (missing values, duplicates, outliers)
    transform_name : str
        Human-readable transform label
    fork : bool
        False replaces: same id, version + 1, upload_key kept.
        True forks: new id, derived name, version 0, source_id set.

    Returns:
    --------
    DataFile
    """
    matrix = [list(row) for row in new_matrix]
    headers = list(matrix[0]) if matrix else []
    content = serialize_csv(matrix)

    common = dict(
        content=content,
        data=matrix,
        headers=headers,
        file_size=len(content.encode('utf-8')),
        validation=validate_csv_data(matrix),
    )

    if fork:
        result = replace(
            data_file,
            id=generate_file_id(),
            name=derive_file_name(data_file.name, transform_name),
            date_added=datetime.now().isoformat(),
            version=0,
            source_id=data_file.id,
            upload_key=None,
            **common,
        )
        logger.info(f"Forked {data_file.name} -> {result.name} ({transform_name})")
    else:
        result = replace(data_file, version=data_file.version + 1, **common)
        logger.info(f"Replaced {data_file.name} with '{transform_name}' (version {result.version})")

    return result


def save_original_to_history(history, data_file):
    """
    Save original dataset to transformation history for reference

    Parameters:
    -----------
    history : dict
        Existing history {entry name: entry dict}
    data_file : DataFile
        Dataset as first uploaded

    Returns:
    --------
    dict : new history; the original is stored only once per dataset
    """
    history = dict(history or {})
    original_name = f"{data_file.name.split('.')[0]}_ORIGINAL"

    if original_name not in history:
        history[original_name] = {
            'data_file': data_file,
            'transform': 'Original (Untransformed)',
            'params': {},
            'timestamp': datetime.now().isoformat(),
            'transform_type': 'original'
        }
    return history


def record_transform(history, data_file, transform_name, params=None):
    """Add a transformed DataFile to a copy of the history"""
    history = dict(history or {})
    entry_name = f"{data_file.name.split('.')[0]}_v{data_file.version}"
    history[entry_name] = {
        'data_file': data_file,
        'transform': transform_name,
        'params': dict(params or {}),
        'timestamp': datetime.now().isoformat(),
        'transform_type': 'transform'
    }
    return history


def known_upload_keys(data_files, recorded=()):
    """
    (name, size) keys of uploads already taken into the workspace

    Parameters:
    -----------
    data_files : dict
        {file_id: DataFile}
    recorded : iterable of (name, size)
        Keys recorded at upload time (kept after a dataset is removed)

    Returns:
    --------
    set : keys the uploader should not import again
    """
    keys = set(recorded)
    keys.update(f.upload_key for f in data_files.values() if f.upload_key is not None)
    return keys
