# ========================
# src/chronic_eda/pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Main orchestrator class that runs every stage in order over one input file.
"""

import logging
from typing import Any, Dict, Optional
from pathlib import Path

from .errors import LoadError
from .ingestion import CSVLoader
from .selection import select_columns
from .cleaning import DataCleaner
from .outliers import OutlierFilter
from .normalization import TopicNormalizer
from .transformation import DataAggregator
from .storage import DataSaver
from ..utils.performance_monitor import monitor_performance
from ..utils.config import Config

logger = logging.getLogger(__name__)


class DataPipeline:
    """
    Orchestrates the whole analysis.
    Load -> select -> clean -> filter outliers -> normalize -> aggregate -> save.
    Each stage returns a new DataFrame; nothing is written until every stage
    has succeeded.
    """

    def __init__(self,
                 input_file: Optional[str] = None,
                 output_dir: Optional[str] = None,
                 config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            input_file (str): Path to input CSV file (defaults to config)
            output_dir (str): Directory for output files (defaults to config)
            config (Config): Configuration object
        """
        self.config = config or Config()
        self.input_file = input_file or self.config.DEFAULT_INPUT_FILE
        self.output_dir = output_dir or self.config.DEFAULT_OUTPUT_DIR

        # Initialize pipeline components
        self.loader = CSVLoader(self.input_file, delimiter=self.config.CSV_DELIMITER)
        self.cleaner = DataCleaner(missing_markers=self.config.MISSING_VALUE_MARKERS)
        self.outlier_filter = OutlierFilter(multiplier=self.config.IQR_MULTIPLIER)
        self.normalizer = TopicNormalizer(degenerate_fill=self.config.DEGENERATE_FILL)
        self.aggregator = DataAggregator(
            topics=self.config.TOPICS,
            top_n_limit=self.config.TOP_N_LIMIT,
            confidence_bounds=self.config.confidence_bounds
        )
        self.saver = DataSaver(self.output_dir)

        logger.info("DataPipeline initialized:")
        logger.info(f"  Input: {self.input_file}")
        logger.info(f"  Output: {self.output_dir}")

    def run(self) -> Dict[str, Any]:
        """
        Execute the complete pipeline from start to finish.

        Returns:
            dict: Stage statistics, saved file paths and the in-memory tables

        Raises:
            LoadError: If the input cannot be loaded; no output is written
        """
        logger.info(f"Starting pipeline for '{self.input_file}'...")

        with monitor_performance("Chronic Disease EDA") as monitor:
            raw = self.loader.load()
            monitor.add_checkpoint('load', len(raw))

            selected = select_columns(raw)
            cleaned = self.cleaner.clean(selected)
            monitor.add_checkpoint('clean', len(cleaned), self.cleaner.get_statistics())

            filtered = self.outlier_filter.filter(cleaned)
            monitor.add_checkpoint('filter_outliers', len(filtered))

            normalized = self.normalizer.normalize(filtered)
            monitor.add_checkpoint('normalize', len(normalized))

            summary = self.aggregator.summarize(normalized)
            overall = self.aggregator.summarize_overall(summary)
            report_tables = self.aggregator.build_report_tables(normalized)
            monitor.add_checkpoint('aggregate', len(summary))

            stats = self._get_processing_stats(raw, summary, overall)

            logger.info("Saving outputs...")
            saved_files = self.saver.save_all_data(
                cleaned=normalized,
                summary=summary,
                overall=overall,
                report_tables=report_tables,
                run_summary=stats
            )
            saved_files['data_dictionary'] = self.saver.create_data_dictionary()

        results = {
            'pipeline_status': 'completed',
            'input_file': self.input_file,
            'output_directory': self.output_dir,
            'saved_files': saved_files,
            'processing_stats': stats,
            'performance': monitor.summary,
            'tables': {
                'cleaned': normalized,
                'summary': summary,
                'overall': overall,
                **report_tables
            }
        }

        logger.info("Pipeline finished successfully.")
        self._log_final_summary(results)

        return results

    def _get_processing_stats(self, raw, summary, overall) -> Dict[str, Any]:
        """Collect statistics from every stage."""
        return {
            'records_loaded': len(raw),
            'cleaning': self.cleaner.get_statistics(),
            'outliers': self.outlier_filter.get_statistics(),
            'normalization': self.normalizer.get_statistics(),
            'aggregation': self.aggregator.get_aggregation_summary(summary, overall),
            'input_file_size': Path(self.input_file).stat().st_size
        }

    def _log_final_summary(self, results: Dict[str, Any]) -> None:
        """Log final pipeline summary."""
        logger.info("="*60)
        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info("="*60)

        stats = results['processing_stats']
        cleaning = stats['cleaning']

        logger.info(f"Input file: {results['input_file']}")
        logger.info(f"Records loaded: {stats['records_loaded']:,}")
        logger.info(f"Data quality rate: {cleaning['success_rate']:.1f}%")
        logger.info(f"Outliers removed: {stats['outliers']['records_dropped']:,}")
        logger.info(f"Summary groups: {stats['aggregation']['summary_groups']:,}")
        logger.info(f"Output files generated: {len(results['saved_files'])}")
        logger.info(f"Output directory: {results['output_directory']}")

        logger.info("Generated datasets:")
        for dataset_type, file_path in results['saved_files'].items():
            logger.info(f"  - {dataset_type}: {file_path}")

        logger.info("="*60)

    def validate_input(self) -> bool:
        """
        Validate input file exists and has the required header.

        Returns:
            bool: True if input is valid
        """
        try:
            self.loader.validate()
        except LoadError as e:
            logger.error(f"Input validation failed: {e}")
            return False

        logger.info(f"Input validation passed: {self.input_file}")
        return True
