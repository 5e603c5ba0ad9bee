# ========================
# src/chronic_eda/pipeline/cleaning.py
# ========================

"""
Data Cleaning Module

Normalizes missing-value markers, coerces the value column to numbers,
drops unusable rows and imputes the remaining numeric gaps.
"""

import logging
import warnings
from typing import Any, Dict, Sequence

import numpy as np
import pandas as pd

from .errors import CoercionWarning

logger = logging.getLogger(__name__)

DEFAULT_MISSING_MARKERS = ('-', '')


class DataCleaner:
    """
    Applies the cleaning rules to a whole dataset at once.
    Each step handles one kind of inconsistency and keeps a count of
    what it touched so the drops stay observable.
    """

    def __init__(self,
                 missing_markers: Sequence[str] = DEFAULT_MISSING_MARKERS,
                 value_column: str = 'DataValue'):
        """
        Initialize the data cleaner.

        Args:
            missing_markers (list): Literal cell values meaning "no data"
            value_column (str): Column that must end up numeric and non-null
        """
        self.missing_markers = list(missing_markers)
        self.value_column = value_column
        self.records_processed = 0
        self.records_dropped = 0
        self.missing_markers_found = 0
        self.coercion_failures = 0
        self.values_imputed = 0
        logger.info(f"DataCleaner initialized with missing markers {self.missing_markers}")

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Apply all cleaning rules and return the cleaned copy.

        Args:
            df (pd.DataFrame): Dataset with the canonical columns

        Returns:
            pd.DataFrame: Rows with a finite value, numeric gaps imputed
        """
        self.records_processed += len(df)
        cleaned = df.copy()

        values = self._normalize_missing_markers(cleaned[self.value_column])
        cleaned[self.value_column] = self._coerce_numeric(values)

        cleaned = self._drop_missing_values(cleaned)
        cleaned = self._impute_numeric_means(cleaned)

        logger.info(f"Cleaning complete: {len(cleaned):,}/{len(df):,} records kept")
        return cleaned

    def _normalize_missing_markers(self, values: pd.Series) -> pd.Series:
        """Turn marker strings such as '-' into NaN."""
        stripped = values.map(lambda v: v.strip() if isinstance(v, str) else v)
        is_marker = stripped.isin(self.missing_markers)

        found = int(is_marker.sum())
        self.missing_markers_found += found
        if found:
            logger.debug(f"Replaced {found} missing-value markers in {self.value_column}")

        return stripped.mask(is_marker)

    def _coerce_numeric(self, values: pd.Series) -> pd.Series:
        """Convert to float; anything unparsable or infinite becomes NaN."""
        numeric = pd.to_numeric(values, errors='coerce').astype(float)
        numeric = numeric.where(np.isfinite(numeric))

        failed = values.notna() & numeric.isna()
        failures = int(failed.sum())
        if failures:
            self.coercion_failures += failures
            examples = values[failed].astype(str).unique()[:5].tolist()
            logger.warning(
                f"{failures} {self.value_column} values could not be parsed as numbers "
                f"and will be dropped, e.g. {examples}"
            )
            warnings.warn(
                f"{failures} non-numeric {self.value_column} values dropped",
                CoercionWarning,
                stacklevel=3,
            )

        return numeric

    def _drop_missing_values(self, df: pd.DataFrame) -> pd.DataFrame:
        keep = df[self.value_column].notna()
        dropped = int((~keep).sum())
        self.records_dropped += dropped
        if dropped:
            logger.info(f"Dropped {dropped} records with no usable {self.value_column}")
        return df[keep].reset_index(drop=True)

    def _impute_numeric_means(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fill NaN in every numeric column with that column's mean."""
        numeric_columns = df.select_dtypes(include='number').columns
        if len(numeric_columns) == 0:
            return df

        missing = df[numeric_columns].isna().sum()
        means = df[numeric_columns].mean()
        for column in missing[missing > 0].index:
            if pd.isna(means[column]):
                logger.warning(f"Column '{column}' has no values to impute from")
                continue
            logger.info(f"Imputing {missing[column]} missing '{column}' values with mean {means[column]:.4f}")
            df[column] = df[column].fillna(means[column])
            self.values_imputed += int(missing[column])

        return df

    def get_statistics(self) -> Dict[str, Any]:
        """Get cleaning statistics."""
        return {
            'records_processed': self.records_processed,
            'missing_markers': self.missing_markers_found,
            'coercion_failures': self.coercion_failures,
            'records_dropped': self.records_dropped,
            'values_imputed': self.values_imputed,
            'records_cleaned': self.records_processed - self.records_dropped,
            'success_rate': (self.records_processed - self.records_dropped) / self.records_processed * 100 if self.records_processed > 0 else 0
        }
