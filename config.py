"""
Table grapher configuration using environment variables and .env file support.

This module loads configuration from environment variables with .env file taking precedence.
The .env file values override system environment variables to ensure consistent configuration.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
# Use override=True to prioritize .env file over system environment variables
load_dotenv(override=True)


def _float_env(name, default):
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _int_env(name, default):
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


# Graph Output Configuration (optional)
# Environment variables: GRAPH_OUTPUT_DIR, GRAPH_PUBLIC_URL_PREFIX
# Generated images are stored under the output directory and referenced
# through the public URL prefix.
graph_output_dir = os.getenv('GRAPH_OUTPUT_DIR', os.path.join('storage', 'graphs'))
graph_public_url_prefix = os.getenv('GRAPH_PUBLIC_URL_PREFIX', '/storage/graphs')

# Column Classification (optional)
# Environment variable: NUMERIC_THRESHOLD
# Minimum fraction of numeric-like data cells for a column to count as numeric.
# Default: 0.5 (inclusive)
numeric_threshold = _float_env('NUMERIC_THRESHOLD', 0.5)

# Page Fetching (optional)
# Environment variables: FETCH_TIMEOUT_SECONDS, SCRAPER_USER_AGENT, TABLE_SELECTOR
# Default: 30 second total timeout, tables marked with Wikipedia's data table classes
fetch_timeout_seconds = _int_env('FETCH_TIMEOUT_SECONDS', 30)
scraper_user_agent = os.getenv(
    'SCRAPER_USER_AGENT', 'Mozilla/5.0 (compatible; WikipediaTableScraper/1.0)'
)
table_selector = os.getenv('TABLE_SELECTOR', 'table.wikitable, table.sortable')

# Chart Fonts (optional)
# Environment variable: FONTS_DIR
# .otf/.ttf files in this directory are registered with matplotlib on import
fonts_dir = os.getenv('FONTS_DIR', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'fonts'))

# Logging (optional)
# Environment variables: LOG_DIRECTORY, LOG_LEVEL
log_directory = os.getenv('LOG_DIRECTORY', 'logs')
log_level = os.getenv('LOG_LEVEL', 'INFO').upper()

# Error Messages
ERROR_MESSAGES = {
    'invalid_url': "Please enter a valid URL (http:// or https://).",
    'invalid_wikipedia_url': "Please enter a valid Wikipedia URL (e.g., https://en.wikipedia.org/wiki/...)",
    'fetch_failed': "Failed to fetch page: {reason}",
    'no_tables': "No tables found on the page.",
    'no_numeric_columns': "No tables with numeric columns found on the page.",
    'empty_extraction': "No numeric values found in column {column}.",
    'empty_series': "Cannot render a chart from an empty series.",
    'output_unwritable': "Cannot write graph to {path}: {reason}",
}
