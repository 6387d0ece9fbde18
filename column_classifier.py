"""
Numeric column detection for scraped HTML tables.
Decides which columns of a table grid hold numeric data despite formatting
noise (thousands separators, units, currency symbols, footnote markers) and
extracts a chosen column as a list of floats.
"""

import re
import logging
from typing import List, Optional

import config

logger = logging.getLogger('table_grapher.column_classifier')

TableGrid = List[List[str]]

# Everything outside digits, the decimal point and the minus sign is noise.
NON_NUMERIC_PATTERN = re.compile(r"[^\d.\-]")
DECIMAL_PATTERN = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)$")


def strip_non_numeric(text: str) -> str:
    """Remove every character that is not a digit, a decimal point or a minus sign."""
    return NON_NUMERIC_PATTERN.sub("", str(text))


def parse_numeric_value(text: str) -> Optional[float]:
    """
    Parse a cell into a float after stripping formatting characters.

    Args:
        text: Raw cell text, e.g. "1,234 kg"

    Returns:
        The parsed value, or None when the stripped text is empty, sign-only
        or not a plain decimal number ("12-34", "1.2.3").
    """
    cleaned = strip_non_numeric(text)
    if not cleaned or not DECIMAL_PATTERN.match(cleaned):
        return None
    return float(cleaned)


def is_numeric_like(text: str) -> bool:
    """Return True if the cell parses as a number once stripped."""
    return parse_numeric_value(text) is not None


class ColumnClassifier:
    """Identifies numeric columns in a table grid and extracts their values."""

    def __init__(self, threshold: Optional[float] = None):
        """
        Args:
            threshold: Minimum fraction of inspected data cells that must be
                numeric-like for a column to qualify (inclusive). Defaults to
                the configured NUMERIC_THRESHOLD.
        """
        self.threshold = config.numeric_threshold if threshold is None else threshold

    def classify_columns(self, grid: TableGrid) -> List[int]:
        """
        Identify which columns contain primarily numeric data.

        Row 0 is treated as the header and only its width is used to decide
        which column indices exist. Data rows without a cell at an index are
        left out of that column's denominator.

        Args:
            grid: Table rows, header first

        Returns:
            Ascending list of numeric column indices
        """
        if not grid or len(grid) < 2:
            return []

        data_rows = grid[1:]
        numeric_columns = []

        for col_idx in range(len(grid[0])):
            numeric_count = 0
            total_count = 0

            for row in data_rows:
                if len(row) > col_idx:
                    total_count += 1
                    if is_numeric_like(row[col_idx]):
                        numeric_count += 1

            if total_count > 0 and numeric_count / total_count >= self.threshold:
                numeric_columns.append(col_idx)

        logger.debug(
            "Classified %d of %d column(s) as numeric: %s",
            len(numeric_columns), len(grid[0]), numeric_columns
        )
        return numeric_columns

    def extract_column(self, grid: TableGrid, col: int) -> List[float]:
        """
        Extract the numeric values of one column, header excluded.

        Rows that are too short or whose cell does not parse contribute
        nothing, so the result can be shorter than the number of data rows.
        """
        values = []

        for row in grid[1:]:
            if 0 <= col < len(row):
                value = parse_numeric_value(row[col])
                if value is not None:
                    values.append(value)

        return values
