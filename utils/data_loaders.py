"""
Data loaders for uploaded CSV text
Handles CSV parsing, numeric cell parsing, numeric-column detection and DataFile creation
"""

import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .logging_config import get_logger

logger = get_logger("data_loaders")

# Full decimal literal: sign, digits with optional fraction, optional exponent
_NUMBER_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')

DEFAULT_ENCODINGS = ('utf-8-sig', 'utf-8', 'latin-1', 'cp1252')


def parse_csv(text: str) -> List[List[str]]:
    """
    Parse CSV text into a matrix of string cells

    Row 0 is the header. A double quote toggles the "inside quotes" state
    unless it is preceded by a backslash; commas split fields only outside
    quotes. Quoted fields cannot span lines.

    Parameters:
    -----------
    text : str
        Raw CSV text

    Returns:
    --------
    list of list of str : parsed matrix (empty list for empty input)
    """
    if text is None:
        return []

    stripped = text.strip()
    if not stripped:
        return []

    matrix = []
    for line in stripped.split('\n'):
        fields = []
        in_quotes = False
        current = []

        for i, char in enumerate(line):
            if char == '"' and (i == 0 or line[i - 1] != '\\'):
                in_quotes = not in_quotes
            elif char == ',' and not in_quotes:
                fields.append(''.join(current).strip())
                current = []
            else:
                current.append(char)

        fields.append(''.join(current).strip())
        matrix.append(fields)

    return matrix


def serialize_csv(data: Sequence[Sequence[Any]]) -> str:
    """
    Serialize a matrix back to CSV text

    Fields containing a comma are wrapped in double quotes.
    """
    lines = []
    for row in data:
        cells = []
        for cell in row:
            text = '' if cell is None else str(cell)
            if ',' in text:
                text = f'"{text}"'
            cells.append(text)
        lines.append(','.join(cells))
    return '\n'.join(lines)


def get_cell(row: Sequence[Any], column_index: int) -> Any:
    """Cell at column_index, or None when the row is too short"""
    if 0 <= column_index < len(row):
        return row[column_index]
    return None


def to_float(value: Any) -> float:
    """
    Parse a cell as a float

    Numbers pass through; strings must be a complete decimal literal.
    Anything else yields NaN.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    if not _NUMBER_PATTERN.match(text):
        return math.nan
    return float(text)


def is_numeric(value: Any) -> bool:
    """Check if a value is a finite number"""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return math.isfinite(to_float(value))


def get_numeric_columns(
    data: Sequence[Sequence[Any]],
    headers: Optional[Sequence[str]] = None
) -> List[Dict[str, Any]]:
    """
    Find the fully numeric columns of a matrix

    A column qualifies only when every data row holds a non-empty, finite
    numeric value at that index. One bad or missing cell disqualifies it.

    Parameters:
    -----------
    data : matrix
        Parsed matrix, row 0 is the header
    headers : sequence of str, optional
        Column names (defaults to row 0)

    Returns:
    --------
    list of dict : [{'index': int, 'name': str}, ...]
    """
    if len(data) <= 1:
        return []

    if headers is None:
        headers = data[0]

    numeric_columns = []
    for col_index in range(len(data[0])):
        column_is_numeric = all(
            is_numeric(get_cell(row, col_index)) for row in data[1:]
        )
        if column_is_numeric:
            name = get_cell(headers, col_index)
            numeric_columns.append({
                'index': col_index,
                'name': name if name else f"Column {col_index + 1}"
            })

    return numeric_columns


def decode_uploaded_bytes(raw: bytes, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    """
    Decode uploaded file bytes, trying several encodings in order

    Raises:
    -------
    ValueError : when no encoding can decode the content
    """
    if isinstance(raw, str):
        return raw

    for enc in encodings:
        try:
            text = raw.decode(enc)
            logger.debug(f"Decoded upload with encoding: {enc}")
            return text
        except (UnicodeDecodeError, LookupError):
            continue

    raise ValueError("Unable to decode file with any encoding")


@dataclass(frozen=True)
class ColumnReference:
    """One column within one uploaded file"""
    file_id: str
    column_index: int
    column_name: str
    file_name: str = ""

    @property
    def key(self) -> str:
        """Selection key used by summary maps and exports"""
        return f"{self.file_id}-{self.column_index}"


@dataclass(frozen=True)
class DataFile:
    """One parsed CSV upload and its metadata"""
    id: str
    name: str
    content: str
    data: List[List[Any]]
    headers: List[str]
    file_size: int = 0
    date_added: str = ""
    validation: Any = None
    version: int = 0
    parsed: bool = True
    source_id: Optional[str] = field(default=None, compare=False)
    # (name, size) of the upload this dataset came from; survives in-place transforms
    upload_key: Optional[Tuple[str, int]] = field(default=None, compare=False)

    @cached_property
    def numeric_columns(self) -> List[Dict[str, Any]]:
        """Numeric columns, computed once per DataFile"""
        return get_numeric_columns(self.data, self.headers)

    @property
    def row_count(self) -> int:
        return max(len(self.data) - 1, 0)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def column_references(self) -> List[ColumnReference]:
        """ColumnReference for every numeric column"""
        return [
            ColumnReference(self.id, col['index'], col['name'], self.name)
            for col in self.numeric_columns
        ]

    def to_record(self) -> Dict[str, Any]:
        """Flat record a persistence backend would store"""
        validation = self.validation
        return {
            'id': self.id,
            'name': self.name.rsplit('.', 1)[0] if '.' in self.name else self.name,
            'original_name': self.name,
            'file_size': self.file_size,
            'row_count': self.row_count,
            'column_count': self.column_count,
            'content': self.content,
            'is_valid': validation.is_valid if validation is not None else None,
            'validation_issues': validation.issues_as_dicts() if validation is not None else [],
            'date_added': self.date_added,
        }


def generate_file_id() -> str:
    """Opaque identifier for a new DataFile"""
    return f"file-{uuid.uuid4().hex[:12]}"


def create_data_file(
    text: str,
    name: str,
    file_size: Optional[int] = None,
    file_id: Optional[str] = None,
    validate: bool = True
) -> DataFile:
    """
    Parse CSV text and wrap it in a DataFile

    Parameters:
    -----------
    text : str
        Decoded CSV text
    name : str
        Original file name
    file_size : int, optional
        Size in bytes (defaults to the encoded text length)
    file_id : str, optional
        Identifier (generated when omitted)
    validate : bool
        Attach a FileValidation report

    Returns:
    --------
    DataFile
    """
    from .data_validation import validate_csv_data

    data = parse_csv(text)
    headers = list(data[0]) if data else []
    validation = validate_csv_data(data) if validate else None

    if file_size is None:
        file_size = len(text.encode('utf-8'))

    data_file = DataFile(
        id=file_id or generate_file_id(),
        name=name,
        content=text,
        data=data,
        headers=headers,
        file_size=file_size,
        date_added=datetime.now().isoformat(),
        validation=validation,
        upload_key=(name, file_size),
    )

    logger.info(f"Loaded {name}: {data_file.row_count} rows x {data_file.column_count} columns")
    return data_file


def load_uploaded_file(uploaded_file, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> DataFile:
    """
    Build a DataFile from an uploaded file object

    Parameters:
    -----------
    uploaded_file : file-like object
        Object with .name and .read() (Streamlit UploadedFile or open file)

    Returns:
    --------
    DataFile
    """
    raw = uploaded_file.read()
    text = decode_uploaded_bytes(raw, encodings)
    size = getattr(uploaded_file, 'size', None)
    if size is None:
        size = len(raw)
    return create_data_file(text, uploaded_file.name, file_size=size)
