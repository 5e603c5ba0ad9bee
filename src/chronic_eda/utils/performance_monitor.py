# ========================
# src/chronic_eda/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Tracks elapsed time, memory usage and row counts for each pipeline stage.
"""

import time
import os
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional

import psutil

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """
    Performance monitoring utility for the pipeline.
    Each stage records a checkpoint with its output row count.
    """

    def __init__(self, name: str = "Pipeline"):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.records_loaded = 0
        self.checkpoints = []
        self.summary: Optional[Dict[str, Any]] = None
        self._last_checkpoint_time = None

        logger.debug(f"PerformanceMonitor initialized: {name}")

    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        self.start_time = time.time()
        self._last_checkpoint_time = self.start_time
        self.peak_memory_mb = self._get_memory_usage_mb()

        logger.info(f"{self.name} - Performance monitoring started")
        logger.info(f"Initial memory usage: {self.peak_memory_mb:.2f} MB")

    def add_checkpoint(self, name: str, rows: int, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Record the end of a pipeline stage.

        Args:
            name (str): Stage name
            rows (int): Rows in the stage's output
            metadata (dict): Optional metadata to store
        """
        now = time.time()
        memory_mb = self._get_memory_usage_mb()
        self.peak_memory_mb = max(self.peak_memory_mb, memory_mb)
        if not self.checkpoints:
            self.records_loaded = rows

        checkpoint = {
            'name': name,
            'rows': rows,
            'stage_seconds': now - (self._last_checkpoint_time or now),
            'memory_mb': memory_mb,
            'metadata': metadata or {}
        }
        self.checkpoints.append(checkpoint)
        self._last_checkpoint_time = now
        logger.info(
            f"{self.name} - {name}: {rows:,} rows in {checkpoint['stage_seconds']:.2f}s, "
            f"Memory: {memory_mb:.2f} MB"
        )

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.time()
        total_time = self.end_time - self.start_time if self.start_time else 0
        throughput = self.records_loaded / total_time if total_time > 0 else 0

        summary = {
            'name': self.name,
            'total_processing_time_seconds': total_time,
            'records_loaded': self.records_loaded,
            'average_throughput_records_per_second': throughput,
            'peak_memory_usage_mb': self.peak_memory_mb,
            'checkpoints': self.checkpoints
        }

        self._log_summary(summary)
        return summary

    def _log_summary(self, summary: Dict[str, Any]) -> None:
        logger.info("="*60)
        logger.info(f"PERFORMANCE SUMMARY - {summary['name']}")
        logger.info("="*60)
        logger.info(f"Total processing time: {summary['total_processing_time_seconds']:.2f} seconds")
        logger.info(f"Records loaded: {summary['records_loaded']:,}")
        logger.info(f"Average throughput: {summary['average_throughput_records_per_second']:.0f} records/second")
        logger.info(f"Peak memory usage: {summary['peak_memory_usage_mb']:.2f} MB")
        for checkpoint in summary['checkpoints']:
            logger.info(f"  {checkpoint['name']}: {checkpoint['rows']:,} rows, {checkpoint['stage_seconds']:.2f}s")
        logger.info("="*60)

    def _get_memory_usage_mb(self) -> float:
        """Get current resident memory in MB."""
        try:
            process = psutil.Process(os.getpid())
            return process.memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            logger.debug(f"Could not get memory usage: {e}")
            return 0.0


@contextmanager
def monitor_performance(name: str = "Pipeline"):
    """
    Context manager for easy performance monitoring.

    Args:
        name (str): Name for this monitoring session

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.summary = monitor.stop_monitoring()
