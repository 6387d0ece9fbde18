"""
Test the command-line entry point.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import graph_cli
from chart_renderer import ChartRenderer
from column_classifier import ColumnClassifier
from error_handler import ConfigurationError
from graph_service import GraphService
from image_sink import LocalImageSink
from table_scraper import TableParser


@pytest.fixture
def service(tmp_path):
    return GraphService(
        fetcher=MagicMock(),
        parser=TableParser("table.wikitable"),
        classifier=ColumnClassifier(),
        renderer=ChartRenderer(),
        sink=LocalImageSink(str(tmp_path / "graphs"), "/storage/graphs"),
    )


def parse(*argv):
    return graph_cli.build_parser().parse_args(list(argv))


class TestArgumentParsing:
    def test_url_with_options(self):
        args = parse("https://en.wikipedia.org/wiki/X", "--column", "2", "--output", "out.png")
        assert args.url == "https://en.wikipedia.org/wiki/X"
        assert args.column == 2
        assert args.output == "out.png"

    def test_source_required(self):
        with pytest.raises(SystemExit):
            parse()

    def test_sources_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse("https://example.com", "--grid-file", "grid.json")


@pytest.mark.asyncio
class TestRun:
    async def test_grid_file(self, service, tmp_path, capsys):
        grid_file = tmp_path / "grid.json"
        grid_file.write_text(json.dumps([
            ["Name", "Age", "City"],
            ["John", 25, "New York"],
            ["Jane", 30, "London"],
            ["Bob", 35, "Paris"],
        ]))
        output = tmp_path / "ages.png"

        status = await graph_cli.run(parse("--grid-file", str(grid_file), "--output", str(output)), service)

        out = capsys.readouterr().out
        assert status == 0
        assert output.exists()
        assert "Extracted 3 data points" in out
        assert "Min: 25.00" in out
        assert "Max: 35.00" in out
        assert "Average: 30.00" in out

    async def test_html_file_without_numeric_columns(self, service, tmp_path, capsys):
        html_file = tmp_path / "page.html"
        html_file.write_text(
            '<table class="wikitable"><tr><th>Name</th></tr><tr><td>John</td></tr></table>',
            encoding="utf-8",
        )

        status = await graph_cli.run(parse("--html-file", str(html_file)), service)

        assert status == 1
        assert "No tables with numeric columns" in capsys.readouterr().out

    async def test_url(self, service, capsys):
        service.fetcher.fetch = AsyncMock(return_value=(
            '<table class="wikitable"><tr><th>Year</th><th>Sales</th></tr>'
            '<tr><td>2020</td><td>$1,000</td></tr><tr><td>2021</td><td>$1,500</td></tr></table>'
        ))

        status = await graph_cli.run(parse("https://en.wikipedia.org/wiki/Sales", "--column", "1"), service)

        assert status == 0
        assert "Column 1: Sales" in capsys.readouterr().out

    async def test_invalid_url(self, service, capsys):
        status = await graph_cli.run(parse("not-a-url"), service)
        assert status == 1
        assert "valid URL" in capsys.readouterr().out

    async def test_wikipedia_only(self, service, capsys):
        status = await graph_cli.run(parse("https://example.com/page", "--wikipedia-only"), service)
        assert status == 1
        assert "Wikipedia" in capsys.readouterr().out

    async def test_negative_column(self, service, capsys):
        status = await graph_cli.run(parse("--grid-file", "grid.json", "--column", "-1"), service)
        assert status == 1

    async def test_missing_grid_file(self, service, tmp_path, capsys):
        status = await graph_cli.run(parse("--grid-file", str(tmp_path / "missing.json")), service)
        assert status == 1
        assert "Error" in capsys.readouterr().out

    async def test_list(self, service, capsys):
        service.generate_from_tables([[["A"], ["1"], ["2"]]])
        status = await graph_cli.run(parse("--list"), service)
        out = capsys.readouterr().out
        assert status == 0
        assert "1 graph(s)" in out
        assert "/storage/graphs/graph_" in out

    async def test_unexpected_drawing_error(self, service, tmp_path, capsys):
        grid_file = tmp_path / "grid.json"
        grid_file.write_text(json.dumps([["Name", "Age"], ["John", 25], ["Jane", 30]]))

        with patch.object(service.renderer, "render", side_effect=RuntimeError("canvas exploded")):
            status = await graph_cli.run(parse("--grid-file", str(grid_file)), service)

        assert status == 1
        assert "Unexpected error: canvas exploded" in capsys.readouterr().out


class TestMain:
    @patch("graph_cli.setup_logging")
    @patch("graph_cli.validate_config", side_effect=ConfigurationError("Table selector is missing or empty in config"))
    def test_configuration_error(self, mock_validate, mock_logging, capsys):
        status = graph_cli.main(["--list"])

        assert status == 1
        assert "Configuration error: Table selector" in capsys.readouterr().out
        mock_logging.assert_called_once()
