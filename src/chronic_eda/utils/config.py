# ========================
# src/chronic_eda/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the pipeline with environment support.
"""

import json
import os
from typing import Dict, Any, List, Optional, Tuple

DEFAULT_TOPICS = [
    'Cardiovascular Disease',
    'Diabetes',
    'Cancer',
    'Nutrition Physical Activity and Weight Status',
    'Chronic Obstructive Pulmonary Disease',
    'Arthritis',
    'Tobacco',
    'Asthma',
    'Overarching Conditions',
    'Oral Health',
]


def _parse_list(value: Optional[str], default: List[str], separator: str = ';') -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(separator) if item.strip()]


def _parse_optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


class Config:
    """
    Configuration class for the pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # File Paths
        self.DEFAULT_INPUT_FILE = os.getenv('CDI_INPUT_FILE', 'data/raw/chronic_disease_indicators.csv')
        self.DEFAULT_OUTPUT_DIR = os.getenv('CDI_OUTPUT_DIR', 'data/processed')
        self.CSV_DELIMITER = os.getenv('CDI_DELIMITER', ',')

        # Cleaning
        self.MISSING_VALUE_MARKERS = ['-', '']

        # Outlier Filtering
        self.IQR_MULTIPLIER = float(os.getenv('CDI_IQR_MULTIPLIER', '1.5'))

        # Normalization (unset keeps NaN for zero-span topics)
        self.DEGENERATE_FILL = _parse_optional_float(os.getenv('CDI_DEGENERATE_FILL'))

        # Aggregation
        self.TOPICS = _parse_list(os.getenv('CDI_TOPICS'), DEFAULT_TOPICS)
        self.TOP_N_LIMIT = int(os.getenv('CDI_TOP_N_LIMIT', '10'))
        self.CONFIDENCE_LOWER = float(os.getenv('CDI_CONFIDENCE_LOWER', '0.025'))
        self.CONFIDENCE_UPPER = float(os.getenv('CDI_CONFIDENCE_UPPER', '0.975'))

        # Sample Data Generation
        self.USE_SAMPLE_DATA = os.getenv('CDI_USE_SAMPLE_DATA', 'false').lower() == 'true'
        self.DEFAULT_SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '5000'))

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

        # Override with provided config
        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    @property
    def confidence_bounds(self) -> Tuple[float, float]:
        return (self.CONFIDENCE_LOWER, self.CONFIDENCE_UPPER)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['delimiter'] = len(self.CSV_DELIMITER) == 1
        validations['iqr_multiplier'] = self.IQR_MULTIPLIER >= 0
        validations['topics'] = len(self.TOPICS) > 0
        validations['top_n_limit'] = self.TOP_N_LIMIT > 0
        validations['confidence_bounds'] = 0.0 <= self.CONFIDENCE_LOWER < self.CONFIDENCE_UPPER <= 1.0
        validations['sample_rows'] = self.DEFAULT_SAMPLE_ROWS > 0

        # Validate log level
        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if attr.isupper() and not callable(getattr(self, attr))
        }

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        return cls(config_dict)

    def __str__(self) -> str:
        """String representation of configuration."""
        lines = ["Configuration Settings:"]
        config_dict = self.to_dict()
        for key, value in sorted(config_dict.items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
