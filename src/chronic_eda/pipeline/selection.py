# ========================
# src/chronic_eda/pipeline/selection.py
# ========================

"""
Column Selection Module

Projects the raw indicator table onto the canonical Record schema.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)

# Source column -> canonical column, in output order
COLUMN_MAP = {
    'YearStart': 'Year',
    'LocationDesc': 'Location',
    'DataSource': 'DataSource',
    'Topic': 'Topic',
    'Question': 'Question',
    'DataValue': 'DataValue',
    'StratificationCategory1': 'Category',
    'Stratification1': 'Subgroup',
}

CANONICAL_COLUMNS = list(COLUMN_MAP.values())


def select_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a renamed copy holding only the canonical columns, rows in input order."""
    selected = df.loc[:, list(COLUMN_MAP)].rename(columns=COLUMN_MAP)
    logger.info(f"Selected {len(CANONICAL_COLUMNS)} of {len(df.columns)} columns")
    return selected.reset_index(drop=True)
