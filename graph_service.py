"""
Graph generation workflow.
Fetches a page, extracts its tables, picks the first table with a numeric
column, extracts the series and renders it to the image sink.
"""

import logging
from dataclasses import dataclass, asdict, field
from typing import List, Optional, Dict, Any

import config
from column_classifier import ColumnClassifier, TableGrid
from chart_renderer import ChartRenderer, ChartSpec
from image_sink import LocalImageSink
from table_scraper import PageFetcher, TableParser
from error_handler import NoTableFound, NoNumericColumn, EmptyExtraction

logger = logging.getLogger('table_grapher.graph_service')

DEFAULT_TITLE = 'Numeric Data Visualization'
X_AXIS_LABEL = 'Record Number'


@dataclass
class GraphResult:
    path: str
    url: str
    table_index: int
    column_index: int
    column_name: str
    point_count: int
    minimum: float
    maximum: float
    mean: float
    table_rows: int
    table_columns: int
    numeric_columns: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SeriesSelection:
    """The table and column chosen for rendering."""
    table_index: int
    table: TableGrid
    column_index: int
    numeric_columns: List[int]
    values: List[float]

    @property
    def column_name(self) -> str:
        header = self.table[0]
        if self.column_index < len(header):
            return header[self.column_index]
        return ''


class GraphService:
    """Orchestrates fetching, classification, extraction and rendering."""

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        parser: Optional[TableParser] = None,
        classifier: Optional[ColumnClassifier] = None,
        renderer: Optional[ChartRenderer] = None,
        sink: Optional[LocalImageSink] = None,
    ):
        self.fetcher = fetcher or PageFetcher()
        self.parser = parser or TableParser()
        self.classifier = classifier or ColumnClassifier()
        self.renderer = renderer or ChartRenderer()
        self.sink = sink or LocalImageSink()

    async def generate_from_url(self, url: str, column: Optional[int] = None,
                                output_path: Optional[str] = None) -> GraphResult:
        """Fetch a page and generate a graph from its first numeric table."""
        html = await self.fetcher.fetch(url)
        return self.generate_from_html(html, column=column, output_path=output_path)

    def generate_from_html(self, html: str, column: Optional[int] = None,
                           output_path: Optional[str] = None) -> GraphResult:
        tables = self.parser.parse(html)
        return self.generate_from_tables(tables, column=column, output_path=output_path)

    def generate_from_tables(self, tables: List[TableGrid], column: Optional[int] = None,
                             output_path: Optional[str] = None) -> GraphResult:
        """
        Generate a graph from already parsed tables.

        Args:
            tables: Candidate grids in document order
            column: Preferred column index; ignored with a warning when it is
                not numeric in the chosen table
            output_path: Destination file, allocated by the sink when omitted

        Returns:
            GraphResult describing the chosen data and the stored image

        Raises:
            NoTableFound, NoNumericColumn, EmptyExtraction, EmptyDataError, OutputError
        """
        selection = self.select_series(tables, column)
        column_name = selection.column_name

        spec = ChartSpec(
            title=f"Wikipedia Data: {column_name}" if column_name else DEFAULT_TITLE,
            x_axis_label=X_AXIS_LABEL,
            y_axis_label=column_name or 'Value',
        )
        path = output_path or self.sink.allocate()
        image = self.renderer.render(selection.values, spec, path)
        stats = image.statistics

        logger.info(
            "Generated graph for table %d column %d (%s): %d point(s) -> %s",
            selection.table_index + 1, selection.column_index, column_name or 'unnamed',
            stats.count, path
        )

        return GraphResult(
            path=path,
            url=self.sink.reference(path),
            table_index=selection.table_index,
            column_index=selection.column_index,
            column_name=column_name,
            point_count=stats.count,
            minimum=stats.minimum,
            maximum=stats.maximum,
            mean=stats.mean,
            table_rows=len(selection.table),
            table_columns=len(selection.table[0]),
            numeric_columns=selection.numeric_columns,
        )

    def select_series(self, tables: List[TableGrid], column: Optional[int] = None) -> SeriesSelection:
        """
        Pick the first table that yields a non-empty numeric series.

        Tables without numeric columns are skipped. A table whose chosen
        column extracts to nothing is skipped as well.
        """
        if not tables:
            raise NoTableFound(config.ERROR_MESSAGES['no_tables'])

        found_numeric = False
        last_empty_column = None

        for index, table in enumerate(tables):
            numeric_columns = self.classifier.classify_columns(table)
            if not numeric_columns:
                logger.info("No numeric columns found in table %d", index + 1)
                continue

            found_numeric = True
            column_index = self._choose_column(numeric_columns, column, index)
            values = self.classifier.extract_column(table, column_index)
            if not values:
                logger.warning("No numeric values found in column %d of table %d", column_index, index + 1)
                last_empty_column = column_index
                continue

            logger.info(
                "Table %d: %d numeric column(s), extracted %d value(s) from column %d",
                index + 1, len(numeric_columns), len(values), column_index
            )
            return SeriesSelection(
                table_index=index,
                table=table,
                column_index=column_index,
                numeric_columns=numeric_columns,
                values=values,
            )

        if not found_numeric:
            raise NoNumericColumn(config.ERROR_MESSAGES['no_numeric_columns'])
        raise EmptyExtraction(config.ERROR_MESSAGES['empty_extraction'].format(column=last_empty_column))

    @staticmethod
    def _choose_column(numeric_columns: List[int], requested: Optional[int], table_index: int) -> int:
        if requested is None:
            return numeric_columns[0]
        if requested not in numeric_columns:
            logger.warning(
                "Column %d is not numeric in table %d, using column %d",
                requested, table_index + 1, numeric_columns[0]
            )
            return numeric_columns[0]
        return requested

    def list_graphs(self) -> List[Dict[str, Any]]:
        return self.sink.list_graphs()
