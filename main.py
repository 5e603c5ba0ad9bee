#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Chronic Disease Indicators Analysis

Runs the pipeline once over the configured input file and writes the
cleaned dataset, summary statistics and report tables.
"""

import sys
import logging
from pathlib import Path

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from chronic_eda.pipeline import DataPipeline
from chronic_eda.utils import Config, setup_logging, DataGenerator


def main():
    """Main execution function."""
    logger = logging.getLogger(__name__)

    try:
        config = Config()
    except ValueError as e:
        setup_logging()
        logger.error(f"Invalid configuration value in environment: {e}")
        return 1

    invalid = [name for name, ok in config.validate_config().items() if not ok]

    setup_logging(
        log_level="INFO" if 'log_level' in invalid else config.LOG_LEVEL,
        log_file="pipeline.log",
        log_dir="logs"
    )

    logger.info("="*60)
    logger.info("CHRONIC DISEASE INDICATORS ANALYSIS - MAIN EXECUTION")
    logger.info("="*60)

    if invalid:
        logger.error(f"Invalid configuration settings: {invalid}")
        return 1

    try:
        input_file = config.DEFAULT_INPUT_FILE

        if config.USE_SAMPLE_DATA:
            logger.info("Generating sample data...")
            generator = DataGenerator(seed=42)
            generation_stats = generator.generate_dataset(
                file_path=input_file,
                num_rows=config.DEFAULT_SAMPLE_ROWS
            )
            logger.info(f"Sample data generated: {generation_stats}")

        pipeline = DataPipeline(
            input_file=input_file,
            output_dir=config.DEFAULT_OUTPUT_DIR,
            config=config
        )
        results = pipeline.run()

        _print_execution_summary(results)

        logger.info("Pipeline execution completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1


def _print_execution_summary(results: dict) -> None:
    """Print the run summary and the report tables."""
    stats = results['processing_stats']
    cleaning = stats['cleaning']
    tables = results['tables']

    print("\n" + "="*70)
    print("PIPELINE EXECUTION SUMMARY")
    print("="*70)

    print("Data Processing:")
    print(f"   - Records loaded: {stats['records_loaded']:,}")
    print(f"   - Dropped (no usable value): {cleaning['records_dropped']:,}")
    print(f"   - Dropped (outliers): {stats['outliers']['records_dropped']:,}")
    print(f"   - Records analysed: {len(tables['cleaned']):,}")
    if stats['normalization']['degenerate_groups']:
        print(f"   - Topics with a single value: {stats['normalization']['degenerate_groups']}")

    print("\nTop topics by total value:")
    print(tables['top_topics'].to_string(index=False))

    print("\nTop locations by total value:")
    print(tables['top_locations'].to_string(index=False))

    print("\nGender breakdown:")
    print(tables['gender_breakdown'].to_string(index=False))

    print("\nOverall summary:")
    print(tables['overall'].to_string(index=False))

    print("\nGenerated Outputs:")
    for dataset_type, file_path in results['saved_files'].items():
        print(f"   - {dataset_type.replace('_', ' ').title()}: {Path(file_path).name}")

    print("="*70)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
