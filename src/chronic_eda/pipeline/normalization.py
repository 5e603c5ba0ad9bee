# ========================
# src/chronic_eda/pipeline/normalization.py
# ========================

"""
Normalization Module

Rescales the value column to [0, 1] independently within each Topic.
"""

import logging
import warnings
from typing import Any, Dict, List, Optional

import pandas as pd

from .errors import DegenerateGroupWarning

logger = logging.getLogger(__name__)


class TopicNormalizer:
    """
    Per-group min-max scaling: (value - min) / (max - min).

    A group whose min equals its max has no span. Its rows become NaN
    unless a degenerate_fill constant is configured.
    """

    def __init__(self,
                 group_column: str = 'Topic',
                 value_column: str = 'DataValue',
                 degenerate_fill: Optional[float] = None):
        """
        Initialize the normalizer.

        Args:
            group_column (str): Column whose groups are scaled independently
            value_column (str): Column to rescale
            degenerate_fill (float): Value for zero-span groups; None keeps NaN
        """
        self.group_column = group_column
        self.value_column = value_column
        self.degenerate_fill = degenerate_fill
        self.degenerate_groups: List[Any] = []
        logger.info(
            f"TopicNormalizer initialized: group by '{group_column}', "
            f"degenerate fill {degenerate_fill!r}"
        )

    def normalize(self, df: pd.DataFrame) -> pd.DataFrame:
        """Return a copy with the value column scaled per group."""
        normalized = df.copy()
        grouped = normalized.groupby(self.group_column, sort=False, dropna=False)[self.value_column]
        minimum = grouped.transform('min')
        maximum = grouped.transform('max')
        span = maximum - minimum

        normalized[self.value_column] = (normalized[self.value_column] - minimum) / span

        degenerate = span == 0
        if degenerate.any():
            self._report_degenerate(normalized.loc[degenerate, self.group_column])
            if self.degenerate_fill is not None:
                normalized.loc[degenerate, self.value_column] = float(self.degenerate_fill)

        logger.info(
            f"Normalized {len(normalized):,} records across "
            f"{normalized[self.group_column].nunique(dropna=False)} {self.group_column} groups"
        )
        return normalized

    def _report_degenerate(self, groups: pd.Series) -> None:
        names = groups.drop_duplicates().tolist()
        self.degenerate_groups.extend(names)
        outcome = 'NaN' if self.degenerate_fill is None else self.degenerate_fill
        logger.warning(
            f"{len(names)} {self.group_column} group(s) have a single distinct value "
            f"and normalize to {outcome}: {names}"
        )
        warnings.warn(
            f"zero-span {self.group_column} groups: {names}",
            DegenerateGroupWarning,
            stacklevel=3,
        )

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'degenerate_groups': list(self.degenerate_groups),
            'degenerate_fill': self.degenerate_fill,
        }
