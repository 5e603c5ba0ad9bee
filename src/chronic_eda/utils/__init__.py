# ========================
# src/chronic_eda/utils/__init__.py
# ========================

"""
Utilities Package

Configuration, logging, monitoring and sample-data helpers for the pipeline.
"""

from .config import Config, DEFAULT_TOPICS
from .performance_monitor import monitor_performance, PerformanceMonitor
from .logging_setup import setup_logging
from .data_generator import DataGenerator

__all__ = [
    'Config',
    'DEFAULT_TOPICS',
    'monitor_performance',
    'PerformanceMonitor',
    'setup_logging',
    'DataGenerator'
]
