# ========================
# tests/test_pipeline.py
# ========================

import math
import unittest
import sys
import os

import numpy as np
import pandas as pd

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from chronic_eda.pipeline.cleaning import DataCleaner
from chronic_eda.pipeline.errors import CoercionWarning, DegenerateGroupWarning
from chronic_eda.pipeline.normalization import TopicNormalizer
from chronic_eda.pipeline.outliers import OutlierFilter
from chronic_eda.pipeline.transformation import DataAggregator, SUMMARY_COLUMNS, OVERALL_COLUMNS
from chronic_eda.utils.config import DEFAULT_TOPICS


def make_records(rows):
    """Build a canonical-schema frame from (Topic, DataValue, overrides) tuples."""
    records = []
    for row in rows:
        topic, value = row[0], row[1]
        record = {
            'Year': 2020,
            'Location': 'Ohio',
            'DataSource': 'BRFSS',
            'Topic': topic,
            'Question': 'Q1',
            'DataValue': value,
            'Category': 'Overall',
            'Subgroup': 'Overall',
        }
        if len(row) > 2:
            record.update(row[2])
        records.append(record)
    return pd.DataFrame(records)


class TestDataCleaner(unittest.TestCase):

    def setUp(self):
        self.cleaner = DataCleaner()

    def test_dash_marker_row_is_dropped(self):
        """
        Tests that the '-' marker row is dropped and the rest become numbers.
        """
        df = make_records([('Cancer', '-'), ('Cancer', '5'), ('Cancer', '15')])

        cleaned = self.cleaner.clean(df)

        self.assertEqual(cleaned['DataValue'].tolist(), [5.0, 15.0])
        stats = self.cleaner.get_statistics()
        self.assertEqual(stats['records_dropped'], 1)
        self.assertEqual(stats['missing_markers'], 1)
        self.assertEqual(stats['coercion_failures'], 0)

    def test_blank_and_padded_markers(self):
        """
        Tests that empty strings and whitespace around markers count as missing.
        """
        df = make_records([('Asthma', ''), ('Asthma', ' - '), ('Asthma', ' 8.5 ')])

        cleaned = self.cleaner.clean(df)

        self.assertEqual(len(cleaned), 1)
        self.assertAlmostEqual(cleaned.loc[0, 'DataValue'], 8.5)
        self.assertEqual(self.cleaner.get_statistics()['missing_markers'], 2)

    def test_unparsable_values_warn_and_drop(self):
        """
        Tests that junk text and infinities are dropped with a CoercionWarning.
        """
        df = make_records([('Tobacco', 'abc'), ('Tobacco', '3.5'), ('Tobacco', 'inf'), ('Tobacco', None)])

        with self.assertWarns(CoercionWarning):
            cleaned = self.cleaner.clean(df)

        self.assertEqual(cleaned['DataValue'].tolist(), [3.5])
        stats = self.cleaner.get_statistics()
        self.assertEqual(stats['coercion_failures'], 2)
        self.assertEqual(stats['records_dropped'], 3)

    def test_na_text_counts_as_coercion_failure(self):
        """
        Tests that "N/A" and "NA" text reach the cleaner and are counted as coercion failures.
        """
        df = make_records([('Arthritis', 'N/A'), ('Arthritis', 'NA'), ('Arthritis', '4')])

        with self.assertWarns(CoercionWarning):
            cleaned = self.cleaner.clean(df)

        self.assertEqual(cleaned['DataValue'].tolist(), [4.0])
        stats = self.cleaner.get_statistics()
        self.assertEqual(stats['coercion_failures'], 2)
        self.assertEqual(stats['missing_markers'], 0)
        self.assertEqual(stats['records_dropped'], 2)

    def test_values_are_finite_after_cleaning(self):
        """
        Tests that every remaining DataValue is a finite float.
        """
        df = make_records([
            ('Diabetes', '1.5'), ('Diabetes', 'n/a text'), ('Diabetes', '-inf'),
            ('Diabetes', 2), ('Diabetes', np.nan), ('Diabetes', '-'),
        ])

        with self.assertWarns(CoercionWarning):
            cleaned = self.cleaner.clean(df)

        self.assertTrue(cleaned['DataValue'].notna().all())
        self.assertTrue(np.isfinite(cleaned['DataValue']).all())
        self.assertEqual(cleaned['DataValue'].dtype, np.float64)

    def test_other_numeric_columns_are_mean_imputed(self):
        """
        Tests that gaps in other numeric columns get the post-drop mean.
        """
        df = make_records([
            ('Arthritis', '10', {'Year': 2019}),
            ('Arthritis', '20', {'Year': np.nan}),
            ('Arthritis', '30', {'Year': 2021}),
            ('Arthritis', '-', {'Year': 1990}),
        ])

        cleaned = self.cleaner.clean(df)

        self.assertEqual(cleaned['Year'].tolist(), [2019.0, 2020.0, 2021.0])
        self.assertEqual(self.cleaner.get_statistics()['values_imputed'], 1)

    def test_input_frame_is_not_modified(self):
        """
        Tests that clean returns a new frame.
        """
        df = make_records([('Cancer', '-'), ('Cancer', '5')])

        self.cleaner.clean(df)

        self.assertEqual(df['DataValue'].tolist(), ['-', '5'])

    def test_success_rate(self):
        df = make_records([('Cancer', '-'), ('Cancer', '5'), ('Cancer', '6'), ('Cancer', '7')])
        self.cleaner.clean(df)
        self.assertAlmostEqual(self.cleaner.get_statistics()['success_rate'], 75.0)


class TestOutlierFilter(unittest.TestCase):

    def setUp(self):
        self.outlier_filter = OutlierFilter()

    def test_extreme_value_is_removed(self):
        """
        Tests the 1.5 x IQR fence using linear quartiles.
        """
        df = make_records([('Cancer', float(v)) for v in list(range(1, 11)) + [100]])

        fence = self.outlier_filter.compute_fence(df)
        filtered = self.outlier_filter.filter(df)

        self.assertAlmostEqual(fence.q1, 3.5)
        self.assertAlmostEqual(fence.q3, 8.5)
        self.assertAlmostEqual(fence.lower, -4.0)
        self.assertAlmostEqual(fence.upper, 16.0)
        self.assertEqual(len(filtered), 10)
        self.assertNotIn(100.0, filtered['DataValue'].tolist())
        self.assertEqual(self.outlier_filter.get_statistics()['records_dropped'], 1)

    def test_fence_bounds_are_inclusive(self):
        """
        Tests that a value exactly on the upper bound is kept.
        """
        df = make_records([('Cancer', v) for v in [2.0, 2.0, 4.0, 4.0, 7.0]])

        filtered = self.outlier_filter.filter(df)

        self.assertEqual(self.outlier_filter.last_fence.upper, 7.0)
        self.assertEqual(len(filtered), 5)

    def test_refiltering_is_a_no_op(self):
        """
        Tests that running the filter again on its own output removes nothing.
        """
        df = make_records([('Cancer', float(v)) for v in list(range(1, 11)) + [100]])

        once = self.outlier_filter.filter(df)
        fence = self.outlier_filter.last_fence
        again_same_fence = self.outlier_filter.filter(once, fence=fence)
        again_recomputed = self.outlier_filter.filter(once)

        pd.testing.assert_frame_equal(once, again_same_fence)
        pd.testing.assert_frame_equal(once, again_recomputed)

    def test_fence_is_global_not_per_topic(self):
        """
        Tests that quartiles come from the whole dataset.
        """
        df = make_records([('Low', 1.0), ('Low', 2.0), ('Low', 3.0), ('High', 50.0)])

        filtered = self.outlier_filter.filter(df)

        self.assertEqual(filtered['Topic'].tolist(), ['Low', 'Low', 'Low'])


class TestTopicNormalizer(unittest.TestCase):

    def test_scenario_cancer_five_and_fifteen(self):
        """
        Tests the cleaned {5, 15} Cancer values normalize to {0, 1}.
        """
        df = make_records([('Cancer', '-'), ('Cancer', '5'), ('Cancer', '15')])

        normalized = TopicNormalizer().normalize(DataCleaner().clean(df))

        self.assertEqual(normalized['DataValue'].tolist(), [0.0, 1.0])

    def test_each_topic_spans_zero_to_one(self):
        """
        Tests that every topic is scaled independently to [0, 1].
        """
        df = make_records([
            ('A', 2.0), ('B', 10.0), ('A', 4.0), ('B', 20.0), ('A', 6.0), ('B', 15.0),
        ])

        normalized = TopicNormalizer().normalize(df)

        by_topic = normalized.groupby('Topic')['DataValue']
        self.assertTrue((by_topic.min() == 0.0).all())
        self.assertTrue((by_topic.max() == 1.0).all())
        self.assertEqual(normalized[normalized['Topic'] == 'A']['DataValue'].tolist(), [0.0, 0.5, 1.0])
        self.assertEqual(normalized[normalized['Topic'] == 'B']['DataValue'].tolist(), [0.0, 1.0, 0.5])

    def test_zero_span_topic_becomes_nan(self):
        """
        Tests that a topic with a single distinct value yields NaN and a warning.
        """
        df = make_records([('Flat', 5.0), ('Flat', 5.0), ('Spread', 1.0), ('Spread', 3.0)])
        normalizer = TopicNormalizer()

        with self.assertWarns(DegenerateGroupWarning):
            normalized = normalizer.normalize(df)

        flat = normalized[normalized['Topic'] == 'Flat']['DataValue']
        self.assertTrue(flat.isna().all())
        self.assertEqual(normalized[normalized['Topic'] == 'Spread']['DataValue'].tolist(), [0.0, 1.0])
        self.assertEqual(normalizer.get_statistics()['degenerate_groups'], ['Flat'])

    def test_zero_span_fill_value(self):
        """
        Tests that a configured fill replaces the NaN for zero-span topics.
        """
        df = make_records([('Single', 9.0), ('Spread', 1.0), ('Spread', 3.0)])

        with self.assertWarns(DegenerateGroupWarning):
            normalized = TopicNormalizer(degenerate_fill=0.5).normalize(df)

        self.assertEqual(normalized['DataValue'].tolist(), [0.5, 0.0, 1.0])


class TestDataAggregator(unittest.TestCase):

    def setUp(self):
        self.aggregator = DataAggregator(topics=DEFAULT_TOPICS)
        male = {'Category': 'Gender', 'Subgroup': 'Male'}
        female = {'Category': 'Gender', 'Subgroup': 'Female'}
        texas = {'Year': 2021, 'Location': 'Texas'}
        self.df = make_records([
            ('Cancer', 0.2, male),
            ('Cancer', 0.4, male),
            ('Cancer', 0.6, male),
            ('Cancer', 0.8, female),
            ('Diabetes', 0.1, texas),
            ('Diabetes', 0.3, texas),
            ('Diabetes', 0.5, {**texas, 'Category': None, 'Subgroup': None}),
            ('Alcohol', 0.9),
        ])

    def _row(self, summary, **keys):
        mask = pd.Series(True, index=summary.index)
        for column, value in keys.items():
            mask &= summary[column] == value
        rows = summary[mask]
        self.assertEqual(len(rows), 1)
        return rows.iloc[0]

    def test_summary_statistics(self):
        """
        Tests mean, median, sample std, count and percentile bounds per group.
        """
        summary = self.aggregator.summarize(self.df)

        self.assertEqual(list(summary.columns), SUMMARY_COLUMNS)
        male = self._row(summary, Topic='Cancer', Subgroup='Male')
        self.assertAlmostEqual(male['Average_Value'], 0.4)
        self.assertAlmostEqual(male['Median_Value'], 0.4)
        self.assertAlmostEqual(male['Std_Dev'], 0.2)
        self.assertEqual(male['Count'], 3)
        self.assertAlmostEqual(male['Confidence_Lower'], 0.21)
        self.assertAlmostEqual(male['Confidence_Upper'], 0.59)

    def test_single_record_group_keeps_nan_std(self):
        """
        Tests that the sample std of one value stays NaN instead of 0.
        """
        summary = self.aggregator.summarize(self.df)

        female = self._row(summary, Topic='Cancer', Subgroup='Female')
        self.assertTrue(math.isnan(female['Std_Dev']))
        self.assertEqual(female['Count'], 1)
        self.assertAlmostEqual(female['Confidence_Lower'], 0.8)
        self.assertAlmostEqual(female['Confidence_Upper'], 0.8)

    def test_only_allow_listed_topics_are_summarized(self):
        summary = self.aggregator.summarize(self.df)
        self.assertEqual(sorted(summary['Topic'].unique()), ['Cancer', 'Diabetes'])

    def test_counts_match_contributing_records(self):
        """
        Tests that null stratification keys form a group and no record is lost.
        """
        summary = self.aggregator.summarize(self.df)

        self.assertEqual(summary['Count'].sum(), 7)
        diabetes = summary[summary['Topic'] == 'Diabetes']
        self.assertEqual(sorted(diabetes['Count'].tolist()), [1, 2])
        self.assertEqual(diabetes['Category'].isna().sum(), 1)

    def test_overall_summary(self):
        """
        Tests the per-topic re-aggregation of the fine-grained summary.
        """
        summary = self.aggregator.summarize(self.df)
        overall = self.aggregator.summarize_overall(summary)

        self.assertEqual(list(overall.columns), OVERALL_COLUMNS)
        cancer = self._row(overall, Topic='Cancer')
        self.assertAlmostEqual(cancer['Average_Value'], 0.6)
        self.assertAlmostEqual(cancer['Median_Value'], 0.6)
        self.assertAlmostEqual(cancer['Std_Dev'], 0.2)
        self.assertEqual(cancer['Count'], 4)
        self.assertAlmostEqual(cancer['Confidence_Lower'], 0.21)
        self.assertAlmostEqual(cancer['Confidence_Upper'], 0.8)

    def test_overall_count_preserves_sum(self):
        summary = self.aggregator.summarize(self.df)
        overall = self.aggregator.summarize_overall(summary)

        expected = summary.groupby('Topic')['Count'].sum()
        for _, row in overall.iterrows():
            self.assertEqual(row['Count'], expected[row['Topic']])

    def test_top_n_orders_by_descending_sum(self):
        """
        Tests that top_n keeps ten groups, largest first, ties in encounter order.
        """
        sums = {'A': 10, 'B': 50, 'C': 5, 'D': 30, 'E': 50, 'F': 1,
                'G': 20, 'H': 40, 'I': 2, 'J': 3, 'K': 4, 'L': 60}
        df = make_records([(topic, float(value)) for topic, value in sums.items()])

        top = self.aggregator.top_n(df, 'Topic')

        self.assertEqual(len(top), 10)
        self.assertEqual(list(top.columns), ['Topic', 'Total_Value'])
        self.assertEqual(top['Topic'].tolist()[:5], ['L', 'B', 'E', 'H', 'D'])
        self.assertTrue(top['Total_Value'].is_monotonic_decreasing)
        self.assertNotIn('F', top['Topic'].tolist())

    def test_top_n_with_fewer_groups(self):
        top = self.aggregator.top_n(self.df, 'Location')
        self.assertEqual(top['Location'].tolist(), ['Ohio', 'Texas'])

    def test_top_n_keeps_null_key_group(self):
        """
        Tests that rows with a null Location are ranked as their own group.
        """
        df = make_records([
            ('Cancer', 5.0, {'Location': 'Ohio'}),
            ('Cancer', 9.0, {'Location': None}),
            ('Cancer', 2.0, {'Location': 'Texas'}),
        ])

        top = self.aggregator.top_n(df, 'Location')

        self.assertEqual(len(top), 3)
        self.assertTrue(pd.isna(top['Location'].iloc[0]))
        self.assertEqual(top['Total_Value'].tolist(), [9.0, 5.0, 2.0])
        self.assertAlmostEqual(top['Total_Value'].sum(), df['DataValue'].sum())

    def test_gender_percentages(self):
        """
        Tests that subgroup sums of 300 and 700 give 30% and 70%.
        """
        df = make_records([
            ('Cancer', 100.0, {'Category': 'Gender', 'Subgroup': 'Male'}),
            ('Asthma', 200.0, {'Category': 'Gender', 'Subgroup': 'Male'}),
            ('Cancer', 700.0, {'Category': 'Gender', 'Subgroup': 'Female'}),
            ('Cancer', 50.0),
        ])

        table = self.aggregator.gender_breakdown(df)

        self.assertEqual(table['Subgroup'].tolist(), ['Male', 'Female'])
        self.assertEqual(table['Total_Value'].tolist(), [300.0, 700.0])
        self.assertAlmostEqual(table['Percentage'].iloc[0], 30.0)
        self.assertAlmostEqual(table['Percentage'].iloc[1], 70.0)

    def test_gender_zero_total_logs_warning(self):
        """
        Tests that a zero gender total leaves Percentage NaN and logs a warning.
        """
        df = make_records([
            ('Cancer', 0.0, {'Category': 'Gender', 'Subgroup': 'Male'}),
            ('Cancer', 0.0, {'Category': 'Gender', 'Subgroup': 'Female'}),
            ('Cancer', 1.0),
        ])

        with self.assertLogs('chronic_eda.pipeline.transformation', level='WARNING') as logs:
            table = self.aggregator.gender_breakdown(df)

        self.assertEqual(table['Total_Value'].tolist(), [0.0, 0.0])
        self.assertTrue(table['Percentage'].isna().all())
        self.assertIn('Percentage is NaN', logs.output[0])

    def test_yearly_trend(self):
        df = make_records([
            ('Cancer', 1.0, {'Year': 2021}),
            ('Cancer', 2.0, {'Year': 2019}),
            ('Asthma', 3.0, {'Year': 2021}),
        ])

        trend = self.aggregator.yearly_trend(df)

        self.assertEqual(trend['Year'].tolist(), [2019, 2021])
        self.assertEqual(trend['Total_Value'].tolist(), [2.0, 4.0])

    def test_report_tables(self):
        tables = self.aggregator.build_report_tables(self.df)
        self.assertEqual(
            sorted(tables),
            ['gender_breakdown', 'top_locations', 'top_topics', 'yearly_trend']
        )


if __name__ == '__main__':
    unittest.main()
