# ========================
# src/chronic_eda/pipeline/outliers.py
# ========================

"""
Outlier Filtering Module

Removes rows whose value falls outside the interquartile-range fence.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IQRFence:
    """Inclusive bounds computed from one dataset's quartiles."""
    q1: float
    q3: float
    multiplier: float = 1.5

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    @property
    def lower(self) -> float:
        return self.q1 - self.multiplier * self.iqr

    @property
    def upper(self) -> float:
        return self.q3 + self.multiplier * self.iqr

    def to_dict(self) -> Dict[str, float]:
        return {
            'q1': self.q1,
            'q3': self.q3,
            'iqr': self.iqr,
            'lower': self.lower,
            'upper': self.upper,
        }


class OutlierFilter:
    """
    Drops rows outside Q1 - k*IQR .. Q3 + k*IQR.

    Quartiles are taken over the whole dataset, not per group, using
    pandas' default linear interpolation between closest ranks.
    """

    def __init__(self, multiplier: float = 1.5, value_column: str = 'DataValue'):
        self.multiplier = multiplier
        self.value_column = value_column
        self.records_processed = 0
        self.records_dropped = 0
        self.last_fence: Optional[IQRFence] = None
        logger.info(f"OutlierFilter initialized with IQR multiplier {multiplier}")

    def compute_fence(self, df: pd.DataFrame) -> IQRFence:
        """Compute the quartile fence for a dataset."""
        values = df[self.value_column]
        fence = IQRFence(
            q1=float(values.quantile(0.25)),
            q3=float(values.quantile(0.75)),
            multiplier=self.multiplier,
        )
        logger.debug(f"IQR fence: {fence.to_dict()}")
        return fence

    def filter(self, df: pd.DataFrame, fence: Optional[IQRFence] = None) -> pd.DataFrame:
        """
        Keep only the rows inside the fence.

        Args:
            df (pd.DataFrame): Cleaned dataset
            fence (IQRFence): Precomputed fence; computed from df when omitted

        Returns:
            pd.DataFrame: Rows with lower <= value <= upper
        """
        if fence is None:
            fence = self.compute_fence(df)
        self.last_fence = fence

        inside = df[self.value_column].between(fence.lower, fence.upper, inclusive='both')
        dropped = int((~inside).sum())

        self.records_processed += len(df)
        self.records_dropped += dropped
        logger.info(
            f"Outlier filter [{fence.lower:.4f}, {fence.upper:.4f}] "
            f"removed {dropped:,} of {len(df):,} records"
        )
        return df[inside].reset_index(drop=True)

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'records_processed': self.records_processed,
            'records_dropped': self.records_dropped,
            'fence': self.last_fence.to_dict() if self.last_fence else None,
        }
