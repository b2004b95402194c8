"""
Validation of parsed CSV matrices
Flags empty files, inconsistent column counts, missing values and duplicate rows
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .logging_config import get_logger

logger = get_logger("data_validation")


@dataclass
class ValidationIssue:
    """One validation finding ('error' or 'warning')"""
    type: str
    message: str
    row_index: Optional[int] = None
    col_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'message': self.message,
            'rowIndex': self.row_index,
            'colIndex': self.col_index,
        }


@dataclass
class FileValidation:
    """Validation report for one uploaded file"""
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    has_duplicate_rows: bool = False
    has_missing_values: bool = False
    has_inconsistent_columns: bool = False

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.type == 'error']

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.type == 'warning']

    def issues_as_dicts(self) -> List[Dict[str, Any]]:
        return [issue.to_dict() for issue in self.issues]


def _row_key(row: Sequence[Any]) -> str:
    return json.dumps(list(row), default=str)


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ''


def validate_csv_data(data: Sequence[Sequence[Any]]) -> FileValidation:
    """
    Validate a parsed CSV matrix

    Inconsistent column counts are errors and make the file invalid.
    Missing cells and duplicate rows are warnings only.

    Parameters
    ----------
    data : matrix
        Parsed matrix, row 0 is the header

    Returns
    -------
    FileValidation
    """
    issues: List[ValidationIssue] = []

    if not data:
        issues.append(ValidationIssue('error', 'File is empty or could not be parsed'))
        return FileValidation(is_valid=False, issues=issues)

    headers = data[0]
    if not headers or all(_is_blank(h) for h in headers):
        issues.append(ValidationIssue('error', 'No column headers found'))

    header_count = len(headers)
    has_missing_values = False
    inconsistent_row_found = False

    for i in range(1, len(data)):
        row = data[i]

        if len(row) != header_count:
            issues.append(ValidationIssue(
                'error',
                f"Row {i + 1} has {len(row)} columns, expected {header_count}",
                row_index=i,
            ))
            inconsistent_row_found = True

        for j, value in enumerate(row):
            if _is_blank(value):
                column_name = headers[j] if j < header_count and headers[j] else 'unnamed'
                issues.append(ValidationIssue(
                    'warning',
                    f"Missing value at row {i + 1}, column {j + 1} ({column_name})",
                    row_index=i,
                    col_index=j,
                ))
                has_missing_values = True

    seen = set()
    duplicate_count = 0
    for row in data[1:]:
        key = _row_key(row)
        if key in seen:
            duplicate_count += 1
        else:
            seen.add(key)

    if duplicate_count:
        issues.append(ValidationIssue(
            'warning',
            f"Found {duplicate_count} duplicate rows. Consider removing them.",
        ))

    validation = FileValidation(
        is_valid=not inconsistent_row_found,
        issues=issues,
        has_duplicate_rows=duplicate_count > 0,
        has_missing_values=has_missing_values,
        has_inconsistent_columns=inconsistent_row_found,
    )
    logger.debug(
        f"Validated {len(data) - 1} rows: {len(validation.errors)} errors, "
        f"{len(validation.warnings)} warnings"
    )
    return validation


def remove_duplicate_rows(data: Sequence[Sequence[Any]]) -> List[List[Any]]:
    """
    Remove exact duplicate data rows, keeping first occurrences

    The header row is always kept. Returns a new matrix.
    """
    if len(data) <= 1:
        return [list(row) for row in data]

    result = [list(data[0])]
    seen = set()
    for row in data[1:]:
        key = _row_key(row)
        if key not in seen:
            seen.add(key)
            result.append(list(row))

    logger.debug(f"Removed {len(data) - len(result)} duplicate rows")
    return result
