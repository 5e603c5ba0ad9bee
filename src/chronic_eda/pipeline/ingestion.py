# ========================
# src/chronic_eda/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Reads the chronic disease indicator CSV into a DataFrame and checks that the
header carries every column the pipeline needs.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from .errors import LoadError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    'YearStart',
    'YearEnd',
    'LocationDesc',
    'DataSource',
    'Topic',
    'Question',
    'DataValue',
    'StratificationCategory1',
    'Stratification1',
]


class CSVLoader:
    """
    Loads a delimited indicator file wholesale into memory.
    The dataset is small enough that no chunking is needed.
    """

    def __init__(self,
                 file_path: str,
                 delimiter: str = ',',
                 required_columns: Optional[Sequence[str]] = None):
        """
        Initialize the CSV loader.

        Args:
            file_path (str): Path to the CSV file to read
            delimiter (str): Field delimiter
            required_columns (list): Columns the header must contain
        """
        self.file_path = file_path
        self.delimiter = delimiter
        self.required_columns = list(required_columns or REQUIRED_COLUMNS)
        self.header: List[str] = []
        logger.info(f"Initialized CSVLoader for file: {file_path}")

    def load(self) -> pd.DataFrame:
        """
        Read the whole file into a DataFrame.

        Numeric columns are parsed as numbers, everything else is kept as
        strings, and only empty cells become NaN. Text such as "NA" or
        "None" is a real value here and is left for the cleaner to judge.

        Returns:
            pd.DataFrame: The raw dataset

        Raises:
            LoadError: If the file is missing, unreadable or lacks required columns
        """
        self.validate()

        try:
            df = pd.read_csv(
                self.file_path,
                sep=self.delimiter,
                encoding='utf-8',
                keep_default_na=False,
                na_values=[''],
                low_memory=False,
            )
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
            logger.error(f"Error reading CSV file: {e}")
            raise LoadError(f"Could not parse '{self.file_path}': {e}") from e

        df.columns = [str(column).strip() for column in df.columns]
        logger.info(f"Loaded {len(df):,} rows and {len(df.columns)} columns from {self.file_path}")
        return df

    def validate(self) -> List[str]:
        """
        Check the path and header without reading the body.

        Returns:
            list: The header columns

        Raises:
            LoadError: If the file is missing, empty or lacks required columns
        """
        self._check_path()
        self.header = self.read_header()
        self._check_header(self.header)
        return self.header

    def read_header(self) -> List[str]:
        """Read only the header row of the file."""
        try:
            header_frame = pd.read_csv(
                self.file_path, sep=self.delimiter, encoding='utf-8', nrows=0,
                keep_default_na=False, na_values=['']
            )
        except pd.errors.EmptyDataError as e:
            logger.error(f"File '{self.file_path}' is empty")
            raise LoadError(f"File '{self.file_path}' is empty") from e
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
            logger.error(f"Error reading CSV header: {e}")
            raise LoadError(f"Could not read header of '{self.file_path}': {e}") from e

        header = [str(column).strip() for column in header_frame.columns]
        logger.info(f"CSV header: {header}")
        return header

    def _check_path(self) -> None:
        path = Path(self.file_path)
        if not path.exists():
            logger.error(f"File '{self.file_path}' was not found")
            raise LoadError(f"File '{self.file_path}' was not found")
        if not path.is_file():
            logger.error(f"Input path is not a file: {self.file_path}")
            raise LoadError(f"Input path is not a file: {self.file_path}")

    def _check_header(self, header: List[str]) -> None:
        missing = [column for column in self.required_columns if column not in header]
        if missing:
            logger.error(f"CSV header is missing required columns: {missing}")
            raise LoadError(
                f"File '{self.file_path}' is missing required columns: {', '.join(missing)}"
            )
