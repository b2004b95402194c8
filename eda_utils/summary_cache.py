"""
Summary cache
Memoises DatasetSummary objects per (file id, column index, file version)
"""

from typing import Any, Dict, Optional, Tuple

from utils.data_loaders import DataFile
from utils.logging_config import get_logger

from .eda_calculations import DatasetSummary, calculate_statistics

logger = get_logger("summary_cache")

CacheKey = Tuple[str, int, int]


class SummaryCache:
    """
    Explicit memoisation map for column statistics.

    An entry is reused only while the DataFile keeps the same version and
    the same matrix object; any transform producing a new matrix recomputes.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, Tuple[Any, DatasetSummary]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get_summary(
        self,
        data_file: DataFile,
        column_index: int,
        column_name: Optional[str] = None
    ) -> DatasetSummary:
        """Cached statistics for one column of a DataFile."""
        key = (data_file.id, column_index, data_file.version)
        entry = self._entries.get(key)

        if entry is not None and entry[0] is data_file.data:
            self.hits += 1
            return entry[1]

        self.misses += 1
        summary = calculate_statistics(data_file.data, column_index, column_name)
        self._entries[key] = (data_file.data, summary)
        return summary

    def invalidate(self, file_id: Optional[str] = None) -> int:
        """
        Drop cached entries for one file (or all files).

        Returns the number of entries removed.
        """
        if file_id is None:
            removed = len(self._entries)
            self._entries.clear()
        else:
            stale = [key for key in self._entries if key[0] == file_id]
            for key in stale:
                del self._entries[key]
            removed = len(stale)

        logger.debug(f"Invalidated {removed} cached summaries")
        return removed
