"""
Configuration for CSV Insight
Chart limits, outlier thresholds and export formatting in one place
"""

import json
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from utils.logging_config import get_logger

logger = get_logger("config")


@dataclass
class ChartConfig:
    """Row windows and bucketing rules for the chart-data preparers"""
    BAR_LIMIT: int = 10
    PIE_LIMIT: int = 8
    SCATTER_LIMIT: int = 100
    TREEMAP_LIMIT: int = 10
    HISTOGRAM_BINS: int = 10
    PIE_OTHERS_THRESHOLD: float = 0.01


@dataclass
class OutlierConfig:
    """Outlier detection defaults"""
    IQR_MULTIPLIER: float = 1.5
    ZSCORE_THRESHOLD: float = 3.0
    ZSCORE_THRESHOLD_OPTIONS: Tuple[float, ...] = (2.0, 2.5, 3.0)
    DEFAULT_METHOD: str = "iqr"  # 'iqr' or 'zscore'


@dataclass
class ExportConfig:
    """Numeric formatting of exported CSV text"""
    EXPONENTIAL_THRESHOLD: float = 1e-4
    EXPONENTIAL_DIGITS: int = 4


@dataclass
class UploadConfig:
    """Accepted uploads"""
    SUPPORTED_FILE_FORMATS: Tuple[str, ...] = (".csv",)
    ENCODINGS: Tuple[str, ...] = ("utf-8-sig", "utf-8", "latin-1", "cp1252")
    MAX_FILE_SIZE_MB: int = 50


class Config:
    """Central configuration manager"""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            config_file: Optional path to JSON config file to override defaults
        """
        self._load_default_config()

        if config_file and os.path.exists(config_file):
            self._load_config_file(config_file)

        self._load_environment_variables()

    def _load_default_config(self):
        """Load default configuration values"""
        self.charts = ChartConfig()
        self.outliers = OutlierConfig()
        self.export = ExportConfig()
        self.upload = UploadConfig()

        self.logging_level = "INFO"
        self.log_to_file = False
        self.debug_mode = False

    def _load_config_file(self, config_file: str):
        """Load configuration from JSON file"""
        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load config file {config_file}: {e}")
            return

        for section, values in config_data.items():
            if not hasattr(self, section):
                continue
            config_obj = getattr(self, section)
            if isinstance(values, dict):
                for key, value in values.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)
            else:
                setattr(self, section, values)

    def _load_environment_variables(self):
        """Load configuration from environment variables"""
        if os.getenv("CHART_BAR_LIMIT"):
            self.charts.BAR_LIMIT = int(os.getenv("CHART_BAR_LIMIT"))

        if os.getenv("CHART_PIE_LIMIT"):
            self.charts.PIE_LIMIT = int(os.getenv("CHART_PIE_LIMIT"))

        if os.getenv("CHART_SCATTER_LIMIT"):
            self.charts.SCATTER_LIMIT = int(os.getenv("CHART_SCATTER_LIMIT"))

        if os.getenv("HISTOGRAM_BINS"):
            self.charts.HISTOGRAM_BINS = int(os.getenv("HISTOGRAM_BINS"))

        if os.getenv("ZSCORE_THRESHOLD"):
            self.outliers.ZSCORE_THRESHOLD = float(os.getenv("ZSCORE_THRESHOLD"))

        if os.getenv("LOG_LEVEL"):
            self.logging_level = os.getenv("LOG_LEVEL")

        if os.getenv("LOG_TO_FILE"):
            self.log_to_file = os.getenv("LOG_TO_FILE").lower() == 'true'

        if os.getenv("DEBUG_MODE"):
            self.debug_mode = os.getenv("DEBUG_MODE").lower() == 'true'


_config: Optional[Config] = None


def get_config() -> Config:
    """Process-wide configuration instance"""
    global _config
    if _config is None:
        _config = Config(os.getenv("CSV_INSIGHT_CONFIG"))
    return _config
