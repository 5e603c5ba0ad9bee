# ========================
# src/chronic_eda/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Synthetic chronic disease indicator data in the public dataset's column
layout, with controlled error injection.
"""

import csv
import random
import logging
from typing import List, Dict, Any, Optional
from pathlib import Path

logger = logging.getLogger(__name__)

HEADER = [
    'YearStart', 'YearEnd', 'LocationAbbr', 'LocationDesc', 'DataSource',
    'Topic', 'Question', 'DataValueUnit', 'DataValueType', 'DataValue',
    'DataValueAlt', 'LowConfidenceLimit', 'HighConfidenceLimit',
    'StratificationCategory1', 'Stratification1',
]


class DataGenerator:
    """
    Generator for realistic chronic disease indicator test datasets.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.rng = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize indicator catalog, locations and stratifications."""
        # Topic -> (data source, questions, typical value range)
        self.topics = {
            'Cardiovascular Disease': ('BRFSS', ['Coronary heart disease among adults', 'Stroke among adults'], (2.0, 8.0)),
            'Diabetes': ('BRFSS', ['Diabetes among adults', 'Prediabetes among adults'], (7.0, 16.0)),
            'Cancer': ('NVSS', ['Cancer of the colon and rectum, mortality', 'Cancer of the lung and bronchus, mortality'], (12.0, 24.0)),
            'Nutrition Physical Activity and Weight Status': ('BRFSS', ['Obesity among adults', 'No leisure-time physical activity among adults'], (20.0, 40.0)),
            'Chronic Obstructive Pulmonary Disease': ('BRFSS', ['Chronic obstructive pulmonary disease among adults'], (4.0, 12.0)),
            'Arthritis': ('BRFSS', ['Arthritis among adults'], (18.0, 35.0)),
            'Tobacco': ('BRFSS', ['Current cigarette smoking among adults'], (8.0, 24.0)),
            'Asthma': ('BRFSS', ['Current asthma among adults'], (7.0, 12.0)),
            'Overarching Conditions': ('BRFSS', ['Fair or poor self-rated health status among adults'], (12.0, 24.0)),
            'Oral Health': ('BRFSS', ['All teeth lost among adults aged 65 years and older'], (8.0, 20.0)),
            'Alcohol': ('BRFSS', ['Binge drinking prevalence among adults'], (10.0, 25.0)),
            'Mental Health': ('BRFSS', ['Frequent mental distress among adults'], (10.0, 20.0)),
        }

        self.locations = [
            ('AL', 'Alabama'), ('AK', 'Alaska'), ('AZ', 'Arizona'), ('CA', 'California'),
            ('CO', 'Colorado'), ('FL', 'Florida'), ('GA', 'Georgia'), ('IL', 'Illinois'),
            ('MA', 'Massachusetts'), ('MI', 'Michigan'), ('NY', 'New York'), ('OH', 'Ohio'),
            ('PA', 'Pennsylvania'), ('TX', 'Texas'), ('WA', 'Washington'), ('US', 'United States'),
        ]

        self.stratifications = [
            ('Overall', 'Overall'),
            ('Gender', 'Male'),
            ('Gender', 'Female'),
            ('Race/Ethnicity', 'White, non-Hispanic'),
            ('Race/Ethnicity', 'Black, non-Hispanic'),
            ('Race/Ethnicity', 'Hispanic'),
        ]

        self.years = list(range(2015, 2022))

    def generate_dataset(self,
                         file_path: str,
                         num_rows: int,
                         error_rate: float = 0.1) -> Dict[str, Any]:
        """
        Generate a dataset with controlled error injection.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of rows to generate
            error_rate (float): Fraction of records with an injected DataValue problem

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} rows with {error_rate:.1%} error rate...")

        stats = {
            'total_rows': num_rows,
            'error_rate': error_rate,
            'records_with_errors': 0,
            'error_types': {}
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)

            for i in range(num_rows):
                writer.writerow(self._generate_single_record(error_rate, stats))

                if (i + 1) % 10000 == 0:
                    logger.debug(f"Generated {i + 1:,} records")

        stats['error_rate_actual'] = stats['records_with_errors'] / num_rows if num_rows else 0.0

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Actual error rate: {stats['error_rate_actual']:.1%}")
        logger.info(f"Error breakdown: {stats['error_types']}")

        return stats

    def _generate_single_record(self, error_rate: float, stats: Dict[str, Any]) -> List[Any]:
        """Generate a single record with a possible DataValue error."""
        topic = self.rng.choice(list(self.topics))
        data_source, questions, (low, high) = self.topics[topic]
        question = self.rng.choice(questions)
        abbr, location = self.rng.choice(self.locations)
        category, subgroup = self.rng.choice(self.stratifications)
        year = self.rng.choice(self.years)

        value = round(self.rng.uniform(low, high), 1)
        margin = round(value * self.rng.uniform(0.05, 0.15), 1)
        data_value: Any = value

        if self.rng.random() < error_rate:
            stats['records_with_errors'] += 1
            data_value = self._inject_error(value, stats)

        return [
            year, year, abbr, location, data_source,
            topic, question, '%', 'Crude Prevalence', data_value,
            value, round(value - margin, 1), round(value + margin, 1),
            category, subgroup,
        ]

    def _inject_error(self, value: float, stats: Dict[str, Any]) -> Any:
        """Return a broken DataValue and record which kind it was."""
        error_type = self.rng.choice(['dash_marker', 'blank', 'junk_text', 'extreme_value'])
        self._track_error_type(stats, error_type)

        if error_type == 'dash_marker':
            return '-'
        if error_type == 'blank':
            return ''
        if error_type == 'junk_text':
            return self.rng.choice(['No data', 'suppressed', '~'])
        return round(value * self.rng.uniform(20, 50), 1)

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        if error_type not in stats['error_types']:
            stats['error_types'][error_type] = 0
        stats['error_types'][error_type] += 1
