# ========================
# src/chronic_eda/pipeline/transformation.py
# ========================

"""
Data Transformation Module

Computes the grouped summary statistics and the derived tables handed to
the reporting layer.
"""

import logging
from typing import Any, Callable, Dict, Sequence, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

SUMMARY_KEYS = ['Topic', 'Year', 'Location', 'Category', 'Subgroup']
STATISTIC_COLUMNS = [
    'Average_Value',
    'Median_Value',
    'Std_Dev',
    'Count',
    'Confidence_Lower',
    'Confidence_Upper',
]
SUMMARY_COLUMNS = SUMMARY_KEYS + STATISTIC_COLUMNS
OVERALL_COLUMNS = ['Topic'] + STATISTIC_COLUMNS


def _percentile(q: float) -> Callable[[pd.Series], float]:
    """Build an aggregation function returning the q-th linear quantile."""
    def percentile(values: pd.Series) -> float:
        return values.quantile(q)
    percentile.__name__ = f"p{q * 100:g}"
    return percentile


class DataAggregator:
    """
    Builds summary tables from the normalized dataset.
    Every method is a pure function of its input frame.
    """

    def __init__(self,
                 topics: Sequence[str],
                 top_n_limit: int = 10,
                 confidence_bounds: Tuple[float, float] = (0.025, 0.975),
                 value_column: str = 'DataValue'):
        """
        Initialize the data aggregator.

        Args:
            topics (list): Topic allow-list for the fine-grained summary
            top_n_limit (int): Number of rows kept by top_n
            confidence_bounds (tuple): Lower and upper empirical percentiles
            value_column (str): Column being aggregated
        """
        self.topics = list(topics)
        self.top_n_limit = top_n_limit
        self.confidence_bounds = confidence_bounds
        self.value_column = value_column
        logger.info(
            f"DataAggregator initialized with {len(self.topics)} topics, "
            f"top_n_limit={top_n_limit}, confidence_bounds={confidence_bounds}"
        )

    def summarize(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Fine-grained statistics per (Topic, Year, Location, Category, Subgroup).

        Only allow-listed topics are included. Null keys form their own group,
        and single-row groups keep a NaN standard deviation.
        """
        subset = df[df['Topic'].isin(self.topics)]
        lower, upper = self.confidence_bounds

        grouped = subset.groupby(SUMMARY_KEYS, dropna=False, sort=True)[self.value_column]
        summary = grouped.agg(
            Average_Value='mean',
            Median_Value='median',
            Std_Dev='std',
            Count='size',
            Confidence_Lower=_percentile(lower),
            Confidence_Upper=_percentile(upper),
        ).reset_index()
        summary = summary[SUMMARY_COLUMNS]

        single_rows = int((summary['Count'] == 1).sum())
        if single_rows:
            logger.info(f"{single_rows} summary groups hold a single record; their Std_Dev is NaN")
        logger.info(
            f"Summarized {len(subset):,} records of {subset['Topic'].nunique()} topics "
            f"into {len(summary):,} groups"
        )
        return summary

    def summarize_overall(self, summary: pd.DataFrame) -> pd.DataFrame:
        """Re-aggregate the fine-grained summary to one row per Topic."""
        overall = summary.groupby('Topic', sort=True).agg(
            Average_Value=('Average_Value', 'mean'),
            Median_Value=('Median_Value', 'median'),
            Std_Dev=('Std_Dev', 'mean'),
            Count=('Count', 'sum'),
            Confidence_Lower=('Confidence_Lower', 'min'),
            Confidence_Upper=('Confidence_Upper', 'max'),
        ).reset_index()
        logger.info(f"Overall summary covers {len(overall)} topics")
        return overall[OVERALL_COLUMNS]

    def top_n(self, df: pd.DataFrame, by: str) -> pd.DataFrame:
        """
        Sum the value column per `by` key and keep the largest totals.

        Ties keep the order in which the groups first appear in df. A null
        key is ranked as its own group.
        """
        totals = df.groupby(by, sort=False, dropna=False)[self.value_column].sum()
        ranked = totals.sort_values(ascending=False, kind='stable').head(self.top_n_limit)
        return ranked.rename('Total_Value').reset_index()

    def gender_breakdown(self, df: pd.DataFrame) -> pd.DataFrame:
        """Value totals per gender subgroup with their share of the grand total."""
        gender = df[df['Category'] == 'Gender']
        totals = gender.groupby('Subgroup', sort=False, dropna=False)[self.value_column].sum()
        table = totals.rename('Total_Value').reset_index()
        grand_total = totals.sum()
        if not table.empty and grand_total == 0:
            logger.warning(
                f"Gender subgroups total 0 across {len(table)} subgroups; Percentage is NaN"
            )
        table['Percentage'] = table['Total_Value'] * 100 / grand_total
        return table

    def yearly_trend(self, df: pd.DataFrame) -> pd.DataFrame:
        """Value totals per year, oldest first."""
        totals = df.groupby('Year', sort=True, dropna=False)[self.value_column].sum()
        return totals.rename('Total_Value').reset_index()

    def build_report_tables(self, df: pd.DataFrame) -> Dict[str, pd.DataFrame]:
        """Derived tables consumed by the chart/report layer."""
        tables = {
            'top_topics': self.top_n(df, 'Topic'),
            'top_locations': self.top_n(df, 'Location'),
            'gender_breakdown': self.gender_breakdown(df),
            'yearly_trend': self.yearly_trend(df),
        }
        for name, table in tables.items():
            logger.debug(f"Report table '{name}': {len(table)} rows")
        return tables

    def get_aggregation_summary(self, summary: pd.DataFrame, overall: pd.DataFrame) -> Dict[str, Any]:
        """Get a summary of the aggregations."""
        return {
            'summary_groups': len(summary),
            'single_record_groups': int((summary['Count'] == 1).sum()),
            'topics_summarized': len(overall),
            'records_summarized': int(summary['Count'].sum()),
        }
