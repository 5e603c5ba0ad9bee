# ========================
# src/chronic_eda/pipeline/__init__.py
# ========================

"""
Data Pipeline Package

This package contains all core components of the analysis pipeline:
- ingestion: CSV loading and header validation
- selection: Projection onto the canonical columns
- cleaning: Missing-marker handling, numeric coercion and imputation
- outliers: IQR fence filtering
- normalization: Per-topic min-max scaling
- transformation: Summary statistics and report tables
- storage: Output management
- orchestrator: Pipeline coordination
"""

from .errors import LoadError, CoercionWarning, DegenerateGroupWarning
from .ingestion import CSVLoader
from .selection import select_columns
from .cleaning import DataCleaner
from .outliers import IQRFence, OutlierFilter
from .normalization import TopicNormalizer
from .transformation import DataAggregator
from .storage import DataSaver
from .orchestrator import DataPipeline

__all__ = [
    'LoadError',
    'CoercionWarning',
    'DegenerateGroupWarning',
    'CSVLoader',
    'select_columns',
    'DataCleaner',
    'IQRFence',
    'OutlierFilter',
    'TopicNormalizer',
    'DataAggregator',
    'DataSaver',
    'DataPipeline'
]
