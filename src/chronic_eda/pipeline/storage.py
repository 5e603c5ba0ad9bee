# ========================
# src/chronic_eda/pipeline/storage.py
# ========================

"""
Data Storage Module

Writes the cleaned dataset, the summary tables and the report tables as
flat CSV files, plus a JSON run summary and a data dictionary.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import pandas as pd

logger = logging.getLogger(__name__)

CLEANED_DATA_FILE = "cleaned_chronic_disease_data.csv"
SUMMARY_STATISTICS_FILE = "enhanced_summary_statistics.csv"
OVERALL_SUMMARY_FILE = "overall_summary_statistics.csv"


class DataSaver:
    """
    Saves pipeline outputs to the output directory.
    The directory is only created when the first file is written, so a run
    that fails earlier leaves nothing behind.
    """

    def __init__(self, output_dir: str = "data/processed"):
        """
        Initialize the data saver.

        Args:
            output_dir (str): Directory to save output files
        """
        self.output_dir = Path(output_dir)
        logger.info(f"DataSaver initialized with output directory: {self.output_dir}")

    def save_all_data(self,
                      cleaned: pd.DataFrame,
                      summary: pd.DataFrame,
                      overall: pd.DataFrame,
                      report_tables: Dict[str, pd.DataFrame],
                      run_summary: Dict[str, Any]) -> Dict[str, str]:
        """
        Save all pipeline outputs.

        Args:
            cleaned: Normalized dataset
            summary: Fine-grained summary statistics
            overall: Per-topic summary statistics
            report_tables: Derived tables for the reporting layer, keyed by name
            run_summary: Stage statistics for the JSON summary

        Returns:
            dict: Mapping of output name to saved file path
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        saved_files = {}

        try:
            saved_files['cleaned_data'] = self._write_csv(cleaned, CLEANED_DATA_FILE)
            saved_files['summary_statistics'] = self._write_csv(summary, SUMMARY_STATISTICS_FILE)
            saved_files['overall_summary'] = self._write_csv(overall, OVERALL_SUMMARY_FILE)

            for name, table in report_tables.items():
                saved_files[name] = self._write_csv(table, f"{name}.csv")

            saved_files['summary'] = self._save_summary(run_summary)

            logger.info(f"All data saved successfully to {len(saved_files)} files")
            return saved_files

        except Exception as e:
            logger.error(f"Error saving data: {e}")
            raise

    def _write_csv(self, df: pd.DataFrame, file_name: str) -> str:
        """Write a DataFrame to CSV without its index."""
        file_path = self.output_dir / file_name
        try:
            df.to_csv(file_path, index=False, encoding='utf-8')
        except OSError as e:
            logger.error(f"Error writing CSV file {file_path}: {e}")
            raise

        logger.info(f"Saved {len(df)} records to {file_path}")
        return str(file_path)

    def _save_summary(self, summary_data: Dict[str, Any]) -> str:
        """Save the run summary as JSON."""
        file_path = self.output_dir / "pipeline_summary.json"

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(summary_data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Summary saved to {file_path}")
        return str(file_path)

    def create_data_dictionary(self) -> str:
        """Create a data dictionary explaining all output files."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.output_dir / "DATA_DICTIONARY.md"

        content = """# Data Dictionary

This document describes the structure and content of all generated data files.

## Files Overview

### 1. cleaned_chronic_disease_data.csv
The cleaned, outlier-filtered and normalized indicator records.

| Column | Type | Description |
|--------|------|-------------|
| Year | integer | Start year of the observation (YearStart) |
| Location | string | State or territory name (LocationDesc) |
| DataSource | string | Survey or registry the value comes from |
| Topic | string | Chronic disease category |
| Question | string | Specific indicator |
| DataValue | float | Value rescaled to 0.0-1.0 within its Topic (empty when the Topic has a single distinct value) |
| Category | string | Stratification axis, e.g. "Gender" |
| Subgroup | string | Stratification value, e.g. "Male" |

### 2. enhanced_summary_statistics.csv
Statistics per Topic, Year, Location, Category and Subgroup for the configured topics.

| Column | Type | Description |
|--------|------|-------------|
| Topic, Year, Location, Category, Subgroup | mixed | Group key |
| Average_Value | float | Mean DataValue |
| Median_Value | float | Median DataValue |
| Std_Dev | float | Sample standard deviation (empty for single-record groups) |
| Count | integer | Number of records in the group |
| Confidence_Lower | float | 2.5th percentile of DataValue |
| Confidence_Upper | float | 97.5th percentile of DataValue |

### 3. overall_summary_statistics.csv
One row per Topic, re-aggregated from the file above.

| Column | Type | Description |
|--------|------|-------------|
| Topic | string | Chronic disease category |
| Average_Value | float | Mean of group averages |
| Median_Value | float | Median of group medians |
| Std_Dev | float | Mean of group standard deviations, ignoring empty ones |
| Count | integer | Total records for the Topic |
| Confidence_Lower | float | Lowest group lower bound |
| Confidence_Upper | float | Highest group upper bound |

### 4. top_topics.csv / top_locations.csv
The ten Topics (or Locations) with the largest DataValue totals.

| Column | Type | Description |
|--------|------|-------------|
| Topic / Location | string | Group key |
| Total_Value | float | Sum of DataValue |

### 5. gender_breakdown.csv
DataValue totals for the "Gender" stratification.

| Column | Type | Description |
|--------|------|-------------|
| Subgroup | string | Gender value |
| Total_Value | float | Sum of DataValue |
| Percentage | float | Share of the total across all gender subgroups (0-100); empty when the total is 0 |

### 6. yearly_trend.csv
DataValue totals per year.

| Column | Type | Description |
|--------|------|-------------|
| Year | integer | Observation year |
| Total_Value | float | Sum of DataValue |

### 7. pipeline_summary.json
Record counts and settings from every pipeline stage.

## Data Quality Notes

- DataValue cells holding "-", blanks or non-numeric text are dropped
- Other numeric gaps are filled with the column mean
- Outliers are removed with an IQR fence (1.5 x IQR by default) over the whole dataset
- Values are min-max normalized per Topic after outlier removal
"""

        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)

        logger.info(f"Data dictionary created at {file_path}")
        return str(file_path)
