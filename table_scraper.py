"""
Page fetching and HTML table extraction.
Downloads a page with aiohttp and turns every marked data table into a grid
of trimmed cell strings.
"""

import re
import asyncio
import logging
from typing import List, Optional

import aiohttp
from bs4 import BeautifulSoup

import config
from error_handler import FetchError

logger = logging.getLogger('table_grapher.table_scraper')

FOOTNOTE_PATTERN = re.compile(r"\[\d+\]")


class PageFetcher:
    """Fetches raw HTML over HTTP."""

    def __init__(self, timeout_seconds: Optional[int] = None, user_agent: Optional[str] = None):
        self.timeout_seconds = timeout_seconds or config.fetch_timeout_seconds
        self.user_agent = user_agent or config.scraper_user_agent

    async def fetch(self, url: str) -> str:
        """
        Fetch the HTML content of a page.

        Args:
            url (str): The URL of the page

        Returns:
            str: The HTML content

        Raises:
            FetchError: On network failure, timeout or a non-200 response
        """
        logger.info(f"Fetching page: {url}")
        headers = {"User-Agent": self.user_agent}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(headers=headers, timeout=timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        logger.error(f"Failed to fetch {url}: HTTP {response.status}")
                        raise FetchError(
                            config.ERROR_MESSAGES['fetch_failed'].format(reason=f"HTTP {response.status}")
                        )
                    html = await response.text()
        except aiohttp.ClientError as e:
            logger.error(f"Error fetching {url}: {str(e)}")
            raise FetchError(config.ERROR_MESSAGES['fetch_failed'].format(reason=str(e))) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out fetching {url} after {self.timeout_seconds}s")
            raise FetchError(
                config.ERROR_MESSAGES['fetch_failed'].format(reason=f"timed out after {self.timeout_seconds}s")
            ) from e

        logger.info(f"Fetched {len(html)} characters from {url}")
        return html


def clean_cell_text(text: str) -> str:
    """Trim a cell and remove reference markers like [1], [2]."""
    return FOOTNOTE_PATTERN.sub("", text.strip())


class TableParser:
    """Extracts data tables from HTML as lists of rows."""

    def __init__(self, selector: Optional[str] = None):
        self.selector = selector or config.table_selector

    def parse(self, html: str) -> List[List[List[str]]]:
        """
        Extract every table matching the selector.

        Args:
            html: The HTML content to parse

        Returns:
            One grid per table, in document order. Rows without cells and
            tables without rows are dropped.
        """
        soup = BeautifulSoup(html, "html.parser")
        tables = []

        for table in soup.select(self.selector):
            grid = []
            for row in table.find_all("tr"):
                cells = [clean_cell_text(cell.get_text()) for cell in row.find_all(["th", "td"])]
                if cells:
                    grid.append(cells)
            if grid:
                tables.append(grid)

        logger.info(f"Found {len(tables)} table(s) matching '{self.selector}'")
        return tables
